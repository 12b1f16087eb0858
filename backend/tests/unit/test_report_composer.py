"""Unit tests for the report composer and its two renderings."""

from wirepro.application.services.postcheck import postcheck
from wirepro.application.services.report_composer import (
    DANGER_RISKS,
    GENERIC_RISK,
    MAX_VERIFICATIONS,
    OFFLINE_NOTE,
    TEST_CASE,
)
from wirepro.domain.entities import RequestDomain
from wirepro.domain.policies import REPORT_SECTIONS


def _headers(text: str) -> list[str]:
    return [line[:-1] for line in text.split("\n") if line.rstrip(":") in REPORT_SECTIONS and line.endswith(":")]


# ── Analysis ──


def test_rcd_trip_example(composer):
    report = composer.analyze("Ogni volta che premo il pulsante il differenziale scatta")

    assert report.is_technical
    assert "FP-01" in report.matched_patterns
    assert any("500V" in v and "1MΩ" in v for v in report.verifications)


def test_builtin_case_matches_relay_and_rcd_patterns(composer):
    report = composer.analyze(str(TEST_CASE["message"]))

    assert report.matched_patterns == ("FP-02", "FP-01")
    assert report.domain is RequestDomain.ELECTRICAL
    assert report.flags.mentions_voltage
    assert report.flags.mentions_rcd
    assert {"PR-02", "SP-01"} <= set(report.matched_rules)
    assert len(report.verifications) == MAX_VERIFICATIONS
    assert len(set(report.verifications)) == len(report.verifications)
    assert any(r.startswith("HIGH RISK — ") for r in report.risks)
    assert report.conclusion.startswith("2 failure pattern(s) identified")


def test_observations_follow_flags(composer):
    report = composer.analyze(str(TEST_CASE["message"]), has_image=True)

    assert report.observations[0].startswith("Technical keywords detected: ")
    assert any(o.startswith("Image attached") for o in report.observations)
    assert any(o.startswith("RCD mentioned") for o in report.observations)
    assert [o for o in report.observations if o.startswith("Pattern identified: ")] == [
        "Pattern identified: Il rele o il contattore non si eccita oppure vibra con ronzio al comando",
        "Pattern identified: Il differenziale scatta quando si accende la luce esterna o si attiva un carico",
    ]


def test_non_technical_request(composer):
    report = composer.analyze("Ciao, come stai?")

    assert not report.is_technical
    assert report.risks == ()
    assert report.conclusion == "Non-technical request: answer freely."
    assert report.domain is RequestDomain.OTHER
    assert composer.render_context(report) == ""


def test_dangerous_request(composer):
    report = composer.analyze("Dal quadro esce odore di bruciato e fumo")

    assert report.is_dangerous
    assert report.risks[: len(DANGER_RISKS)] == DANGER_RISKS
    assert report.conclusion.startswith("STOP")
    assert {"PR-02", "SP-01"} <= set(report.matched_rules)
    assert "DANGEROUS CONDITION" in composer.render_context(report)


def test_generic_risk_when_nothing_else_applies(composer):
    report = composer.analyze("Il termostato non chiude")

    assert report.is_technical
    assert report.matched_rules == ()
    assert report.risks == (GENERIC_RISK,)


def test_technical_request_without_patterns_asks_for_specifics(composer):
    report = composer.analyze("Ho una domanda sul fusibile")

    assert report.is_technical
    assert report.matched_patterns == ()
    assert report.hypotheses == ()
    assert report.conclusion.startswith("Generic technical question")


def test_summary_is_plain_data(composer):
    summary = composer.analyze(str(TEST_CASE["message"])).to_summary()

    assert summary["is_technical"] is True
    assert summary["domain"] == "electrical"
    assert summary["matched_patterns"] == ["FP-02", "FP-01"]
    assert {h["confidence"] for h in summary["hypotheses"]} <= {"PROBABLE", "UNVERIFIABLE"}


# ── Context view ──


def test_context_view_names_the_six_sections(composer):
    context = composer.render_context(composer.analyze(str(TEST_CASE["message"])))

    assert context.startswith("[DIAGNOSTIC ENGINE")
    assert "OBSERVATIONS / COMPONENTS INVOLVED / HYPOTHESES / OPERATIONAL CHECKS / REAL RISKS / NEXT STEP" in context
    assert "- [PROBABLE] " in context
    assert "ENGINE CONCLUSION: " in context


def test_context_view_caps_verifications(composer):
    context = composer.render_context(composer.analyze(str(TEST_CASE["message"])))
    block = context.split("VERIFICATIONS TO PROPOSE:\n", 1)[1].split("\n\n", 1)[0]

    assert len(block.split("\n")) == 6


# ── Standalone view ──


def test_standalone_view_is_schema_complete(composer):
    report = composer.analyze(str(TEST_CASE["message"]))
    text = composer.render_standalone(report)

    assert _headers(text) == list(REPORT_SECTIONS)
    assert text.endswith(OFFLINE_NOTE)
    assert f"- {report.verifications[0]}" in text.split("NEXT STEP:", 1)[1]

    checked = postcheck(text)
    assert not checked.altered


def test_standalone_view_defaults_for_empty_buckets(composer):
    report = composer.analyze("Ho una domanda sul fusibile")
    text = composer.render_standalone(report)

    assert "- [UNVERIFIABLE] Insufficient data to formulate a precise hypothesis." in text
    assert "- fusibile (from keywords)." in text
    assert _headers(text) == list(REPORT_SECTIONS)


def test_standalone_view_limits_hypotheses_and_checks(composer):
    report = composer.analyze(str(TEST_CASE["message"]))
    text = composer.render_standalone(report)

    hypotheses = text.split("HYPOTHESES:\n", 1)[1].split("\n\n", 1)[0].split("\n")
    checks = text.split("OPERATIONAL CHECKS:\n", 1)[1].split("\n\n", 1)[0].split("\n")

    assert len(hypotheses) == 5
    assert checks[0].startswith("1) ")
    assert len(checks) == 5


def test_summary_carries_match_scores(composer):
    summary = composer.analyze(str(TEST_CASE["message"])).to_summary()

    assert summary["pattern_scores"] == {"FP-02": 17, "FP-01": 15}
    assert set(summary["rule_scores"]) == set(summary["matched_rules"])
    assert all(score >= 3 for score in summary["rule_scores"].values())
