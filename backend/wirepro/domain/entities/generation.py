"""Domain entities for answer generation and the cascade outcome."""

from dataclasses import dataclass, field
from typing import Any

from .chat_message import ChatCompletionResult, ChatMessage, ContentPart
from ..exceptions import ErrorKind

# Provider identity reported when the answer was built locally
OFFLINE_PROVIDER = "rocco-offline"
OFFLINE_MODEL = "local-knowledge"


@dataclass(frozen=True)
class ImageAttachment:
    """An image sent along with the user text (base64, no data: prefix)."""

    data_base64: str
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data_base64}"


@dataclass
class GenerationRequest:
    """Everything a generation provider needs for one logical turn."""

    system_instructions: str
    user_text: str
    prior_turns: list[ChatMessage] = field(default_factory=list)
    image: ImageAttachment | None = None
    context_blocks: list[str] = field(default_factory=list)

    def to_messages(self) -> list[ChatMessage]:
        """Flatten into chat messages: system (+context), history, user turn."""
        system_parts = [self.system_instructions]
        system_parts.extend(block for block in self.context_blocks if block)
        messages = [ChatMessage(role="system", content="\n\n".join(system_parts))]
        messages.extend(self.prior_turns)

        if self.image is None:
            messages.append(ChatMessage(role="user", content=self.user_text))
        else:
            messages.append(
                ChatMessage(
                    role="user",
                    content=[
                        ContentPart(type="image_url", image_url={"url": self.image.data_url}),
                        ContentPart(type="text", text=self.user_text),
                    ],
                )
            )
        return messages


@dataclass
class ProviderAttempt:
    """Tagged result of one provider call inside the cascade."""

    provider: str
    model: str
    ok: bool
    result: ChatCompletionResult | None = None
    error: BaseException | None = None
    error_kind: ErrorKind | None = None
    duration_ms: int = 0

    def describe(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "model": self.model,
            "ok": self.ok,
            "error": str(self.error) if self.error else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "duration_ms": self.duration_ms,
        }


@dataclass
class CascadeOutcome:
    """Successful cascade run: the answer and who produced it."""

    result: ChatCompletionResult
    provider: str
    model: str
    fallback_used: bool
    attempts: list[ProviderAttempt] = field(default_factory=list)


@dataclass
class DiagnosticAnswer:
    """Final payload returned to the orchestration layer for persistence."""

    answer_text: str
    used_provider: str
    used_model: str
    fallback_used: bool
    diagnostic_summary: dict[str, Any]
    confidence_tag: str | None = None
    banned_phrases: list[str] = field(default_factory=list)
    attempts: list[ProviderAttempt] = field(default_factory=list)

    @property
    def is_offline(self) -> bool:
        return self.used_provider == OFFLINE_PROVIDER

    def to_turn_payload(self) -> dict[str, Any]:
        """Assistant-turn record in the shape the persistence layer stores."""
        return {
            "role": "assistant",
            "answerText": self.answer_text,
            "usedProvider": self.used_provider,
            "usedModel": self.used_model,
            "fallbackUsed": self.fallback_used,
            "diagnosticSummary": self.diagnostic_summary,
            "confidence": self.confidence_tag,
        }
