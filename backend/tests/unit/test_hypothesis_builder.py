"""Unit tests for the hypothesis builder."""

from wirepro.application.services.hypothesis_builder import (
    build_all,
    build_hypotheses,
    confidence_for,
)
from wirepro.domain.entities import Confidence, FailurePattern


def test_confirmation_wording_never_promotes():
    pattern = FailurePattern(
        id="P",
        symptom="s",
        likely_causes=("a", "b", "c"),
        confidence_logic=(
            "Confermato se l'isolamento è < 1 MΩ",
            "Non verificabile senza ispezione",
            "NOT VERIFIABLE remotely",
        ),
    )

    confidences = [h.confidence for h in build_hypotheses(pattern)]

    assert confidences == [Confidence.PROBABLE, Confidence.UNVERIFIABLE, Confidence.UNVERIFIABLE]


def test_pattern_without_causes_uses_symptom():
    pattern = FailurePattern(id="P", symptom="Il relè vibra")

    hypotheses = build_hypotheses(pattern)

    assert len(hypotheses) == 1
    assert hypotheses[0].cause == "Il relè vibra"
    assert hypotheses[0].confidence is Confidence.PROBABLE


def test_malformed_logic_falls_back_to_probable():
    pattern = FailurePattern.from_dict({
        "id": "P",
        "symptom": "s",
        "likely_causes": ["a", "b", "c"],
        "confidence_logic": [42, None],
    })

    confidences = [h.confidence for h in build_hypotheses(pattern)]

    assert confidences == [Confidence.PROBABLE] * 3


def test_missing_cause_drops_its_logic_too():
    pattern = FailurePattern.from_dict({
        "id": "P",
        "symptom": "s",
        "likely_causes": [None, "A", "B"],
        "confidence_logic": ["ok", "non verificabile", "ok"],
    })

    hypotheses = [(h.cause, h.confidence) for h in build_hypotheses(pattern)]

    assert hypotheses == [("A", Confidence.UNVERIFIABLE), ("B", Confidence.PROBABLE)]


def test_symptom_only_pattern_keeps_its_logic():
    pattern = FailurePattern.from_dict({
        "id": "P",
        "symptom": "Relè muto",
        "confidence_logic": ["Non verificabile da remoto"],
    })

    assert build_hypotheses(pattern)[0].confidence is Confidence.UNVERIFIABLE


def test_confidence_for_handles_missing_values():
    assert confidence_for(None) is Confidence.PROBABLE
    assert confidence_for("") is Confidence.PROBABLE
    assert confidence_for("È NON VERIFICABILE") is Confidence.UNVERIFIABLE


def test_shipped_knowledge_never_yields_confirmed(knowledge_store):
    hypotheses = build_all(knowledge_store.failure_patterns)

    assert hypotheses
    assert all(h.confidence is not Confidence.CONFIRMED for h in hypotheses)


def test_render_uses_bracketed_token():
    pattern = FailurePattern(id="P", symptom="s", likely_causes=("Bobina interrotta",))

    assert build_hypotheses(pattern)[0].render() == "[PROBABLE] Bobina interrotta"
