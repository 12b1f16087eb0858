"""Unit tests for the postcheck validator."""

import logging

from wirepro.application.services.postcheck import (
    extract_confidence_tag,
    find_banned_phrases,
    parse_sections,
    postcheck,
)
from wirepro.domain.policies import NO_HYPOTHESIS_LINE, REPORT_SECTIONS, SECTION_PLACEHOLDER

COMPLETE = "\n\n".join(
    [
        "OBSERVATIONS:\n- Il differenziale scatta alla accensione.",
        "COMPONENTS INVOLVED:\n- Differenziale 30 mA.",
        "HYPOTHESES:\n- [PROBABLE] Dispersione verso terra.",
        "OPERATIONAL CHECKS:\n1) Megohmetro 500V tra L e PE.",
        "REAL RISKS:\n- Contatto indiretto.",
        "NEXT STEP:\n- Misurare l'isolamento.",
    ]
)


def _section(text: str, title: str) -> list[str]:
    return [line for line in parse_sections(text).sections[title] if line.strip()]


def test_complete_answer_is_untouched():
    result = postcheck(COMPLETE)

    assert result.text == COMPLETE
    assert not result.altered
    assert result.banned_phrases == []


def test_free_text_gets_every_section():
    result = postcheck("Il relè è guasto.")

    assert result.added_sections == list(REPORT_SECTIONS)
    assert result.inserted_no_hypothesis
    assert result.text.startswith("Il relè è guasto.\n\nOBSERVATIONS:\n" + SECTION_PLACEHOLDER)
    assert _section(result.text, "HYPOTHESES") == [NO_HYPOTHESIS_LINE]
    assert _section(result.text, "NEXT STEP") == [SECTION_PLACEHOLDER]


def test_empty_section_is_padded_but_not_reported_as_added():
    result = postcheck("OBSERVATIONS:\n\nHYPOTHESES:\n- [PROBABLE] Bobina interrotta.")

    assert "OBSERVATIONS" not in result.added_sections
    assert result.added_sections == ["COMPONENTS INVOLVED", "OPERATIONAL CHECKS", "REAL RISKS", "NEXT STEP"]
    assert _section(result.text, "OBSERVATIONS") == [SECTION_PLACEHOLDER]
    assert not result.inserted_no_hypothesis


def test_missing_confidence_token_keeps_existing_hypotheses():
    text = COMPLETE.replace("[PROBABLE] ", "")

    result = postcheck(text)

    assert result.inserted_no_hypothesis
    assert _section(result.text, "HYPOTHESES") == [NO_HYPOTHESIS_LINE, "- Dispersione verso terra."]


def test_markdown_and_localized_headers():
    text = "## OSSERVAZIONI:\n- Quadro aperto.\n**Ipotesi:** [PROBABLE] relè incollato\nProssimo passo: misurare A1-A2"

    parsed = parse_sections(text)

    assert parsed.sections["OBSERVATIONS"] == ["- Quadro aperto."]
    assert parsed.sections["HYPOTHESES"] == ["- [PROBABLE] relè incollato"]
    assert parsed.sections["NEXT STEP"] == ["- misurare A1-A2"]


def test_numbered_headers_are_recognised():
    result = postcheck("1. OBSERVATIONS:\n- a\n2) **HYPOTHESES:**\n- [PROBABLE] b")

    assert _section(result.text, "OBSERVATIONS") == ["- a"]
    assert _section(result.text, "HYPOTHESES") == ["- [PROBABLE] b"]
    assert result.added_sections == ["COMPONENTS INVOLVED", "OPERATIONAL CHECKS", "REAL RISKS", "NEXT STEP"]
    assert result.text.startswith("OBSERVATIONS:")


def test_numbered_check_lines_stay_in_their_section():
    assert _section(COMPLETE, "OPERATIONAL CHECKS") == ["1) Megohmetro 500V tra L e PE."]


def test_repeated_headers_are_merged_in_canonical_order():
    text = "NEXT STEP:\n- uno\nOBSERVATIONS:\n- due\nNEXT STEP:\n- tre\nHYPOTHESES:\n- [CONFIRMED] x"

    result = postcheck(text)

    assert result.text.index("OBSERVATIONS:") < result.text.index("NEXT STEP:")
    assert _section(result.text, "NEXT STEP") == ["- uno", "- tre"]


def test_postcheck_is_idempotent():
    first = postcheck("Risposta libera senza struttura.")
    second = postcheck(first.text)

    assert second.text == first.text
    assert not second.altered


def test_offline_answers_are_scanned_only():
    text = "Risposta locale. Potrebbe essere qualsiasi cosa."

    result = postcheck(text, offline=True)

    assert result.text == text
    assert not result.altered
    assert result.banned_phrases == ["potrebbe essere qualsiasi cosa"]


def test_none_answer_becomes_an_empty_report():
    result = postcheck(None)

    assert result.added_sections == list(REPORT_SECTIONS)
    assert result.text.startswith("OBSERVATIONS:")


def test_banned_phrases_counted_per_occurrence_and_not_rewritten(caplog):
    text = COMPLETE + "\nCould be anything, really. It could be anything. È impossibile dirlo a distanza."

    with caplog.at_level(logging.WARNING, logger="Postcheck"):
        result = postcheck(text)

    assert result.banned_phrases == [
        "could be anything",
        "could be anything",
        "è impossibile dirlo a distanza",
    ]
    assert "Could be anything, really." in result.text
    assert sum("Banned phrase in answer" in r.getMessage() for r in caplog.records) == 3


def test_find_banned_phrases_is_accent_insensitive():
    assert find_banned_phrases("e impossibile dirlo a distanza") == ["è impossibile dirlo a distanza"]


def test_extract_confidence_tag():
    assert extract_confidence_tag("- [probable] x\n- [CONFIRMED] y") == "PROBABLE"
    assert extract_confidence_tag("nessun tag") is None
    assert extract_confidence_tag(None) is None
