"""Knowledge context block — the most pertinent knowledge entries, as prompt text.

Scoring here is a looser substring match than the diagnostic matcher: any
query word longer than two characters counts once per field it appears in.
"""

import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from wirepro.application.services.knowledge_store import KnowledgeStore
from wirepro.domain.entities import (
    Component,
    FailurePattern,
    KnowledgeEntry,
    ProtectionRule,
    SafetyProtocol,
)

E = TypeVar("E", bound=KnowledgeEntry)

QUERY_PREFIX_LENGTH = 300
MIN_WORD_LENGTH = 3

CONTEXT_HEADER = "INTERNAL TECHNICAL KNOWLEDGE CONTEXT:"
CONTEXT_INSTRUCTION = (
    "INSTRUCTION: use this information as technical reference ONLY if it is "
    "pertinent to the question."
)

_WORD_SPLIT = re.compile(r"[\s,;.!?]+")


def query_words(text: str | None) -> list[str]:
    prefix = str(text or "").strip()[:QUERY_PREFIX_LENGTH].lower()
    return [w for w in _WORD_SPLIT.split(prefix) if len(w) >= MIN_WORD_LENGTH]


def text_score(text: str, words: Sequence[str]) -> int:
    lower = str(text or "").lower()
    return sum(1 for w in words if w in lower)


def score_component(item: Component, words: Sequence[str]) -> float:
    score = float(sum(text_score(kw, words) for kw in item.keywords))
    score += text_score(item.id, words)
    score += text_score(item.notes, words) * 0.5
    return score


def score_pattern(item: FailurePattern, words: Sequence[str]) -> float:
    score = float(text_score(item.symptom, words) * 2)
    score += sum(text_score(cause, words) for cause in item.likely_causes)
    return score


def score_rule(item: ProtectionRule, words: Sequence[str]) -> float:
    score = float(text_score(item.title, words) * 2)
    score += text_score(item.rule, words)
    score += sum(text_score(seen, words) for seen in item.if_seen_in_photo)
    return score


def score_protocol(item: SafetyProtocol, words: Sequence[str]) -> float:
    score = float(text_score(item.title, words) * 2)
    score += sum(text_score(check, words) for check in item.pre_checks) * 0.5
    return score


def _best(
    items: Sequence[E],
    scorer: Callable[[E, Sequence[str]], float],
    words: Sequence[str],
    limit: int,
) -> list[E]:
    scored = [(scorer(item, words), i, item) for i, item in enumerate(items)]
    scored = [entry for entry in scored if entry[0] > 0]
    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [item for _, _, item in scored[:limit]]


# ── Formatting ──────────────────────────────────────────────────────

def format_component(c: Component) -> str:
    header = f"COMPONENT: {c.id.upper()}"
    if c.brand:
        label = " ".join(part for part in (c.brand, c.model) if part)
        header += f" [{label}]"
    lines = [header]
    if c.typical_faults:
        lines.append("  Typical faults: " + "; ".join(c.typical_faults[:3]))
    if c.field_checks:
        lines.append("  Field checks:")
        lines.extend(f"    {check}" for check in c.field_checks[:4])
    if c.notes:
        lines.append(f"  Notes: {c.notes}")
    return "\n".join(lines)


def format_pattern(p: FailurePattern) -> str:
    lines = [f"FAILURE PATTERN: {p.symptom}"]
    if p.likely_causes:
        lines.append("  Likely causes: " + "; ".join(p.likely_causes[:3]))
    if p.confidence_logic and p.confidence_logic[0]:
        lines.append(f"  Confidence logic: {p.confidence_logic[0]}")
    if p.checks:
        lines.append("  Checks:")
        lines.extend(f"    {check}" for check in p.checks[:4])
    if p.example_case:
        lines.append(f"  Example case: {p.example_case[:200]}")
    return "\n".join(lines)


def format_rule(r: ProtectionRule) -> str:
    lines = [f"RULE [{r.risk_level.upper()}]: {r.title}", f"  {r.rule}"]
    if r.verification_steps:
        lines.append("  Verification steps:")
        lines.extend(f"    {step}" for step in r.verification_steps[:3])
    return "\n".join(lines)


def format_protocol(p: SafetyProtocol) -> str:
    lines = [f"SAFETY PROTOCOL: {p.title}"]
    if p.lockout_tagout:
        lines.append("  LOTO: " + "; ".join(p.lockout_tagout[:3]))
    if p.stop_conditions:
        lines.append(f"  STOP conditions: {p.stop_conditions[0]}")
    return "\n".join(lines)


def build_knowledge_context(store: KnowledgeStore, text: str | None) -> str:
    """Prompt block with at most 2 components, 2 patterns, 1 rule and 1 protocol.

    Returns "" when the text has no usable words or nothing matches.
    """
    words = query_words(text)
    if not words:
        return ""

    components = _best(store.components, score_component, words, 2)
    patterns = _best(store.failure_patterns, score_pattern, words, 2)
    rules = _best(store.protection_rules, score_rule, words, 1)
    protocols = _best(store.safety_protocols, score_protocol, words, 1)

    if not (components or patterns or rules or protocols):
        return ""

    lines = [CONTEXT_HEADER]
    for group, formatter in (
        (components, format_component),
        (patterns, format_pattern),
        (rules, format_rule),
        (protocols, format_protocol),
    ):
        if group:
            lines.append("")
            lines.extend(formatter(item) for item in group)

    lines.append("")
    lines.append(CONTEXT_INSTRUCTION)
    return "\n".join(lines)
