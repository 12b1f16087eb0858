"""Unit tests for the knowledge matcher and scoring functions."""

from wirepro.application.services.knowledge_matcher import (
    MATCH_THRESHOLD,
    KnowledgeMatcher,
    Query,
    overlap,
    score_pattern,
    score_rule,
)
from wirepro.application.services.knowledge_store import KnowledgeStore
from wirepro.domain.entities import FailurePattern, ProtectionRule, SafetyProtocol


# ── Helpers ──


def _pattern(pid: str, symptom: str, causes=(), checks=()) -> FailurePattern:
    return FailurePattern(id=pid, symptom=symptom, likely_causes=tuple(causes), checks=tuple(checks))


# ── Scoring ──


def test_overlap_counts_repeated_candidate_tokens():
    query = Query("il differenziale scatta")

    assert overlap("scatta scatta luce", query) == 2


def test_pattern_score_weights_and_pair_boost():
    pattern = _pattern(
        "X",
        "differenziale scatta",
        causes=["dispersione verso terra"],
        checks=["misurare isolamento"],
    )
    query = Query("il differenziale scatta sempre")

    # 3 * 2 symptom tokens + 4 for (differenziale, scatta)
    assert score_pattern(pattern, query) == 10


def test_pair_boost_requires_both_terms_in_query():
    pattern = _pattern("X", "differenziale scatta")

    assert score_pattern(pattern, Query("il differenziale")) == 3


def test_causes_and_checks_contribute():
    pattern = _pattern("X", "nulla", causes=["bobina interrotta"], checks=["misurare bobina"])

    # cause: 2 * 1, check: 1 * 1
    assert score_pattern(pattern, Query("la bobina")) == 3


def test_rule_score_weights():
    rule = ProtectionRule(
        id="R",
        when_to_apply="cassetta esterna",
        rule="guarnizione integra",
        if_seen_in_photo=("acqua nella cassetta",),
    )
    query = Query("acqua nella cassetta esterna")

    # 3 * 2 when_to_apply tokens + 2 seen-in-photo phrase
    assert score_rule(rule, query) == 8


# ── Selection ──


def test_threshold_filters_weak_matches():
    store = KnowledgeStore(
        failure_patterns=(
            _pattern("weak", "nulla", checks=["bobina"]),
            _pattern("strong", "bobina interrotta"),
        )
    )
    matches = KnowledgeMatcher(store).match_patterns(Query("la bobina"))

    assert [m.entry.id for m in matches] == ["strong"]
    assert all(m.score >= MATCH_THRESHOLD for m in matches)


def test_ties_keep_source_order_and_top_two():
    store = KnowledgeStore(
        failure_patterns=(
            _pattern("a", "bobina"),
            _pattern("b", "bobina"),
            _pattern("c", "bobina"),
        )
    )
    matches = KnowledgeMatcher(store).match_patterns(Query("bobina"))

    assert [m.entry.id for m in matches] == ["a", "b"]


def test_higher_score_wins_over_order():
    store = KnowledgeStore(
        failure_patterns=(
            _pattern("low", "bobina"),
            _pattern("high", "bobina contattore"),
        )
    )
    matches = KnowledgeMatcher(store).match_patterns(Query("bobina contattore"))

    assert [m.entry.id for m in matches] == ["high", "low"]


def test_mandatory_rules_forced_on_risk_signal():
    store = KnowledgeStore(
        protection_rules=(ProtectionRule(id="PR-02", title="LOTO", when_to_apply="nulla"),),
        safety_protocols=(SafetyProtocol(id="SP-01", title="Sicurezza"),),
    )
    matcher = KnowledgeMatcher(store, mandatory_rule_ids=["PR-02", "SP-01"])

    forced = matcher.match_rules(Query("cassetta"), risk_signal=True)
    plain = matcher.match_rules(Query("cassetta"), risk_signal=False)

    assert [m.entry.id for m in forced] == ["PR-02", "SP-01"]
    assert all(m.score == MATCH_THRESHOLD for m in forced)
    assert plain == []


def test_mandatory_rule_not_duplicated_when_already_matched():
    store = KnowledgeStore(
        protection_rules=(ProtectionRule(id="PR-02", title="LOTO", when_to_apply="cassetta esterna"),),
    )
    matcher = KnowledgeMatcher(store, mandatory_rule_ids=["PR-02"])

    matches = matcher.match_rules(Query("cassetta esterna"), risk_signal=True)

    assert [m.entry.id for m in matches] == ["PR-02"]
    assert matches[0].score == 6


def test_unknown_mandatory_id_is_ignored():
    matcher = KnowledgeMatcher(KnowledgeStore(), mandatory_rule_ids=["PR-99"])

    assert matcher.match_rules(Query("cassetta"), risk_signal=True) == []


def test_outdoor_query_always_includes_loto_rule(composer):
    report = composer.analyze("La cassetta sul muro ha la guarnizione rotta")

    assert report.flags.mentions_outdoor
    assert "PR-02" in report.matched_rules
    assert "SP-01" in report.matched_rules
