from .chat_message import ChatMessage, ContentPart, TokenUsage, ChatCompletionResult
from .diagnosis import (
    Confidence,
    DiagnosticReport,
    DomainFlags,
    Hypothesis,
    RequestDomain,
    ScoredMatch,
)
from .generation import (
    OFFLINE_MODEL,
    OFFLINE_PROVIDER,
    CascadeOutcome,
    DiagnosticAnswer,
    GenerationRequest,
    ImageAttachment,
    ProviderAttempt,
)
from .knowledge import (
    Component,
    FailurePattern,
    KnowledgeEntry,
    ProtectionRule,
    SafetyProtocol,
)

__all__ = [
    "ChatMessage",
    "ContentPart",
    "TokenUsage",
    "ChatCompletionResult",
    "Confidence",
    "DiagnosticReport",
    "DomainFlags",
    "Hypothesis",
    "RequestDomain",
    "ScoredMatch",
    "OFFLINE_MODEL",
    "OFFLINE_PROVIDER",
    "CascadeOutcome",
    "DiagnosticAnswer",
    "GenerationRequest",
    "ImageAttachment",
    "ProviderAttempt",
    "Component",
    "FailurePattern",
    "KnowledgeEntry",
    "ProtectionRule",
    "SafetyProtocol",
]
