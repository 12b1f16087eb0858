"""Unit tests for application settings configuration."""

from pathlib import Path

from wirepro.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_relative_knowledge_dir_resolves_from_backend_dir():
    settings = Settings(knowledge_dir="data/knowledge")

    backend_dir = Path(__file__).resolve().parents[2]
    assert settings.knowledge_path == backend_dir / "data" / "knowledge"


def test_absolute_knowledge_dir_is_kept(tmp_path):
    settings = Settings(knowledge_dir=str(tmp_path))

    assert settings.knowledge_path == tmp_path


def test_default_mandatory_rules_and_provider():
    settings = Settings()

    assert settings.mandatory_rule_ids == ["PR-02", "SP-01"]
    assert settings.default_provider in {"openai", "anthropic", "openrouter"}
