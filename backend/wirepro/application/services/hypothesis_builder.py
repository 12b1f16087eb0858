"""Hypothesis builder — turns matched failure patterns into (cause, confidence) pairs.

Static knowledge never confirms a cause: only a live measurement could.
A confidence-logic line can therefore only downgrade a cause to
UNVERIFIABLE; wording such as "confirmed if ..." describes the condition
for confirmation and leaves the cause PROBABLE.
"""

from collections.abc import Iterable

from wirepro.application.services.text_normalizer import normalize
from wirepro.domain.entities import Confidence, FailurePattern, Hypothesis

UNVERIFIABLE_MARKERS: tuple[str, ...] = ("non verificabile", "not verifiable")


def confidence_for(logic: str | None) -> Confidence:
    """Confidence implied by one confidence-logic line (missing or malformed → PROBABLE)."""
    if not isinstance(logic, str) or not logic:
        return Confidence.PROBABLE
    text = normalize(logic)
    if any(marker in text for marker in UNVERIFIABLE_MARKERS):
        return Confidence.UNVERIFIABLE
    return Confidence.PROBABLE


def build_hypotheses(pattern: FailurePattern) -> list[Hypothesis]:
    """One hypothesis per declared cause; the symptom stands in when none is declared."""
    causes = pattern.likely_causes or (pattern.symptom,)
    logic = pattern.confidence_logic

    hypotheses = []
    for index, cause in enumerate(causes):
        line = logic[index] if index < len(logic) else None
        hypotheses.append(Hypothesis(cause=cause, confidence=confidence_for(line)))
    return hypotheses


def build_all(patterns: Iterable[FailurePattern]) -> list[Hypothesis]:
    hypotheses: list[Hypothesis] = []
    for pattern in patterns:
        hypotheses.extend(build_hypotheses(pattern))
    return hypotheses
