"""Domain entities for the diagnostic pre-analysis of a single request."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .knowledge import KnowledgeEntry

E = TypeVar("E", bound=KnowledgeEntry)


class Confidence(str, Enum):
    """Certainty level attached to every hypothesis line."""

    CONFIRMED = "CONFIRMED"
    PROBABLE = "PROBABLE"
    UNVERIFIABLE = "UNVERIFIABLE"

    @property
    def token(self) -> str:
        """Bracketed form used in rendered reports, e.g. ``[PROBABLE]``."""
        return f"[{self.value}]"


class RequestDomain(str, Enum):
    """Coarse technical domain of a request."""

    ELECTRICAL = "electrical"
    THERMAL = "thermal"
    NETWORK = "network"
    HOME_AUTOMATION = "home_automation"
    PLUMBING = "plumbing"
    OTHER = "other"


@dataclass(frozen=True)
class ScoredMatch(Generic[E]):
    """A knowledge entry paired with its score for one query.

    ``order`` is the entry's position in its source collection and breaks
    ties between equal scores.
    """

    entry: E
    score: int
    order: int = 0

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.score, self.order)


@dataclass(frozen=True)
class Hypothesis:
    """A candidate cause with its confidence level."""

    cause: str
    confidence: Confidence = Confidence.PROBABLE

    def render(self) -> str:
        return f"{self.confidence.token} {self.cause}"


@dataclass(frozen=True)
class DomainFlags:
    """Keyword-driven signals detected in the request text."""

    is_technical: bool = False
    is_dangerous: bool = False
    mentions_voltage: bool = False
    mentions_rcd: bool = False
    mentions_outdoor: bool = False
    mentions_measurement: bool = False


@dataclass(frozen=True)
class DiagnosticReport:
    """Structured pre-analysis — built once per request, read-only afterwards.

    Consumed both by the context block injected ahead of a generative call
    and by the offline standalone answer.
    """

    flags: DomainFlags
    conclusion: str
    has_image: bool = False
    domain: RequestDomain = RequestDomain.OTHER
    matched_keywords: tuple[str, ...] = ()
    matched_patterns: tuple[str, ...] = ()
    matched_rules: tuple[str, ...] = ()
    observations: tuple[str, ...] = ()
    hypotheses: tuple[Hypothesis, ...] = ()
    verifications: tuple[str, ...] = ()
    risks: tuple[str, ...] = ()
    pattern_scores: dict[str, int] = field(default_factory=dict, compare=False)
    rule_scores: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def is_technical(self) -> bool:
        return self.flags.is_technical

    @property
    def is_dangerous(self) -> bool:
        return self.flags.is_dangerous

    def to_summary(self) -> dict[str, Any]:
        """Compact, JSON-serializable summary handed to the orchestration layer."""
        return {
            "is_technical": self.flags.is_technical,
            "is_dangerous": self.flags.is_dangerous,
            "mentions_voltage": self.flags.mentions_voltage,
            "mentions_rcd": self.flags.mentions_rcd,
            "mentions_outdoor": self.flags.mentions_outdoor,
            "mentions_measurement": self.flags.mentions_measurement,
            "has_image": self.has_image,
            "domain": self.domain.value,
            "matched_keywords": list(self.matched_keywords),
            "matched_patterns": list(self.matched_patterns),
            "matched_rules": list(self.matched_rules),
            "pattern_scores": dict(self.pattern_scores),
            "rule_scores": dict(self.rule_scores),
            "hypotheses": [
                {"cause": h.cause, "confidence": h.confidence.value}
                for h in self.hypotheses
            ],
            "conclusion": self.conclusion,
        }
