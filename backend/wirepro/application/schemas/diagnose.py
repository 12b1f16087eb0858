"""Pydantic v2 schemas (DTOs) for diagnostic requests and responses."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


# ── Request ──


class HistoryTurnSchema(BaseModel):
    """A prior conversation turn supplied by the caller."""

    role: str = Field(..., pattern=r"^(user|assistant)$")
    content: str


class DiagnoseRequest(BaseModel):
    """A technical request: free text, an optional photo, or both."""

    message: str | None = Field(default=None, max_length=8000)
    image_base64: str | None = Field(
        default=None,
        description="Base64 image, raw or as a 'data:image/...;base64,' URL",
    )
    image_mime_type: str = Field(default="image/jpeg", pattern=r"^image/[a-z0-9.+-]+$")
    history: list[HistoryTurnSchema] = Field(default_factory=list)
    provider: str | None = Field(
        default=None,
        pattern=r"^(openai|anthropic|openrouter)$",
        description="Preferred provider; tried first when configured",
    )

    @model_validator(mode="after")
    def _require_message_or_image(self) -> "DiagnoseRequest":
        if not (self.message and self.message.strip()) and not self.image_base64:
            raise ValueError("Either 'message' or 'image_base64' is required")
        return self

    def split_image(self) -> tuple[str, str] | None:
        """(base64 payload, mime type), unwrapping a data URL if one was sent."""
        if not self.image_base64:
            return None
        data = self.image_base64.strip()
        mime_type = self.image_mime_type
        if data.startswith("data:") and "," in data:
            header, data = data.split(",", 1)
            mime_type = header[5:].split(";", 1)[0] or mime_type
        return data, mime_type


# ── Response ──


class ProviderAttemptResponse(BaseModel):
    provider: str
    model: str
    ok: bool
    error: str | None = None
    error_kind: str | None = None
    duration_ms: int = 0


class DiagnoseResponse(BaseModel):
    """The validated answer plus the data the caller persists with the turn."""

    answer_text: str
    used_provider: str
    used_model: str
    fallback_used: bool
    confidence: str | None = None
    diagnostic_summary: dict[str, Any]
    banned_phrases: list[str] = Field(default_factory=list)
    attempts: list[ProviderAttemptResponse] = Field(default_factory=list)


class EngineTestResponse(BaseModel):
    """Self-test output for the built-in diagnostic case."""

    input: dict[str, Any]
    report: dict[str, Any]
    observations: list[str]
    verifications: list[str]
    risks: list[str]
    context: str
    offline_answer: str
    knowledge: dict[str, int]
