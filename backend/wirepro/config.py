import json
import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path("data/settings.json")
_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)
_OVERRIDE_KEYS = frozenset({
    "openai_model",
    "anthropic_model",
    "openrouter_model",
    "default_provider",
})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Wire Pro Diagnostics API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3020"]

    # Generation providers; a provider without an API key is skipped
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_model: str = "claude-3-5-sonnet-latest"
    anthropic_version: str = "2023-06-01"

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_app_name: str = "Wire Pro Diagnostics"
    openrouter_model: str = "openai/gpt-4o-mini"

    default_provider: str = "openai"
    provider_timeout_s: float = 60.0
    max_tokens: int = 1200
    temperature: float = 0.2

    # Diagnostic engine
    history_limit: int = 10
    response_language: str = "Italian"
    knowledge_dir: str = "data/knowledge"    # Relative to backend directory
    mandatory_rule_ids: list[str] = ["PR-02", "SP-01"]

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_engine: str = "INFO"           # Knowledge store, composer, postcheck
    log_level_providers: str = "INFO"        # Provider cascade and adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def knowledge_path(self) -> Path:
        """Absolute knowledge directory; relative values resolve from the backend dir."""
        path = Path(self.knowledge_dir)
        if path.is_absolute():
            return path
        return _BACKEND_DIR / path

    def model_post_init(self, __context: object) -> None:
        """Merge runtime overrides from data/settings.json into provider settings."""
        if _SETTINGS_FILE.exists():
            try:
                overrides = json.loads(_SETTINGS_FILE.read_text("utf-8"))
                for key in _OVERRIDE_KEYS:
                    if key in overrides and isinstance(overrides[key], str):
                        object.__setattr__(self, key, overrides[key])
            except Exception as exc:
                _config_logger.warning("Could not load settings overrides: %s", exc)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
