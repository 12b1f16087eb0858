"""Matcher/scorer — weighted lexical overlap between a query and knowledge entries."""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from wirepro.application.services.knowledge_store import KnowledgeStore
from wirepro.application.services.text_normalizer import normalize, tokenize
from wirepro.domain.entities import (
    FailurePattern,
    KnowledgeEntry,
    ProtectionRule,
    SafetyProtocol,
    ScoredMatch,
)

E = TypeVar("E", bound=KnowledgeEntry)

MATCH_THRESHOLD = 3
TOP_PATTERNS = 2
TOP_RULES = 3

SYMPTOM_WEIGHT = 3
CAUSE_WEIGHT = 2
CHECK_WEIGHT = 1
PAIR_BOOST = 4

WHEN_TO_APPLY_WEIGHT = 3
SEEN_IN_PHOTO_WEIGHT = 2
RULE_TEXT_WEIGHT = 1

# Domain co-occurrences that signal far more together than apart
PAIR_BOOSTS: tuple[tuple[str, str], ...] = (
    ("differenziale", "scatta"),
    ("rcd", "scatta"),
    ("rele", "contattore"),
    ("relay", "luce"),
    ("24v", "plc"),
    ("tensione", "flottante"),
    ("ghost", "voltage"),
    ("ip", "guarnizione"),
    ("esterno", "pressacavi"),
    ("magnetoterm", "caldo"),
    ("morsett", "allentato"),
)


class Query:
    """A request text prepared once for scoring: normalized form and token set."""

    __slots__ = ("text", "normalized", "tokens")

    def __init__(self, text: str):
        self.text = text
        self.normalized = normalize(text)
        self.tokens = frozenset(tokenize(text))


def overlap(candidate: str, query: Query) -> int:
    """Count candidate tokens present in the query; repeated tokens count again."""
    return sum(1 for token in tokenize(candidate) if token in query.tokens)


def score_pattern(pattern: FailurePattern, query: Query) -> int:
    score = overlap(pattern.symptom, query) * SYMPTOM_WEIGHT
    score += sum(overlap(cause, query) for cause in pattern.likely_causes) * CAUSE_WEIGHT
    score += sum(overlap(check, query) for check in pattern.checks) * CHECK_WEIGHT

    symptom = normalize(pattern.symptom)
    for first, second in PAIR_BOOSTS:
        relevant = first in symptom or second in symptom
        if relevant and first in query.normalized and second in query.normalized:
            score += PAIR_BOOST
    return score


def score_rule(rule: ProtectionRule, query: Query) -> int:
    score = overlap(rule.when_to_apply, query) * WHEN_TO_APPLY_WEIGHT
    score += sum(
        SEEN_IN_PHOTO_WEIGHT
        for phrase in rule.if_seen_in_photo
        if phrase and normalize(phrase) in query.normalized
    )
    score += overlap(rule.rule, query) * RULE_TEXT_WEIGHT
    return score


def top_matches(
    scored: Iterable[ScoredMatch[E]],
    limit: int,
    threshold: int = MATCH_THRESHOLD,
) -> list[ScoredMatch[E]]:
    """Drop matches under the threshold, order by (score desc, source order), keep ``limit``."""
    survivors = [m for m in scored if m.score >= threshold]
    survivors.sort(key=lambda m: m.sort_key)
    return survivors[:limit]


class KnowledgeMatcher:
    """Scores the knowledge store against a request.

    ``mandatory_rule_ids`` are forced into the rule results (at the
    threshold score) whenever the caller reports a risk signal.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        mandatory_rule_ids: Sequence[str] = ("PR-02", "SP-01"),
    ):
        self._store = store
        self._mandatory_rule_ids = tuple(mandatory_rule_ids)

    def match_patterns(self, query: Query) -> list[ScoredMatch[FailurePattern]]:
        scored = (
            ScoredMatch(entry=pattern, score=score_pattern(pattern, query), order=i)
            for i, pattern in enumerate(self._store.failure_patterns)
        )
        return top_matches(scored, TOP_PATTERNS)

    def match_rules(
        self,
        query: Query,
        *,
        risk_signal: bool = False,
    ) -> list[ScoredMatch[ProtectionRule | SafetyProtocol]]:
        scored = (
            ScoredMatch(entry=rule, score=score_rule(rule, query), order=i)
            for i, rule in enumerate(self._store.protection_rules)
        )
        matches: list[ScoredMatch[ProtectionRule | SafetyProtocol]] = top_matches(scored, TOP_RULES)

        if risk_signal:
            present = {m.entry.id for m in matches}
            base_order = len(self._store.protection_rules)
            for offset, rule_id in enumerate(self._mandatory_rule_ids):
                if rule_id in present:
                    continue
                entry = self._store.find_rule(rule_id)
                if entry is None:
                    continue
                matches.append(
                    ScoredMatch(entry=entry, score=MATCH_THRESHOLD, order=base_order + offset)
                )
                present.add(rule_id)
        return matches
