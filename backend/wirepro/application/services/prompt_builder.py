"""Request planner — domain classification, system prompt and prior-turn shaping."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from wirepro.application.services.text_normalizer import normalize
from wirepro.domain.entities import ChatMessage, RequestDomain
from wirepro.domain.policies import GOLDEN_RULES, HARD_SAFETY_RULES, REPORT_SECTIONS

# First match wins, so the order matters
_DOMAIN_PATTERNS: tuple[tuple[RequestDomain, re.Pattern[str]], ...] = (
    (
        RequestDomain.ELECTRICAL,
        re.compile(
            r"quadro|differenziale|magnetoterm|\brcd\b|\bmt\b|\bfase\b|neutro|\bterra\b"
            r"|\b230|\b400|\bplc\b|contattore|teleruttore|trasformatore|\b24v\b"
        ),
    ),
    (
        RequestDomain.THERMAL,
        re.compile(r"caldaia|termosif|\bacs\b|pompa|valvola|pressostato|circolatore"),
    ),
    (
        RequestDomain.NETWORK,
        re.compile(r"\blan\b|router|\bswitch\b|\bpoe\b|\bip\b|ethernet|cavo rete"),
    ),
    (
        RequestDomain.HOME_AUTOMATION,
        re.compile(r"shelly|zigbee|z-wave|alexa|\btapo\b|domot"),
    ),
    (
        RequestDomain.PLUMBING,
        re.compile(r"perdita|rubinetto|scarico|\btubo\b|sifone"),
    ),
)

_CHAT_ROLES = frozenset({"user", "assistant"})


def classify_domain(text: str) -> RequestDomain:
    normalized = normalize(text)
    for domain, pattern in _DOMAIN_PATTERNS:
        if pattern.search(normalized):
            return domain
    return RequestDomain.OTHER


@dataclass(frozen=True)
class RequestPlan:
    """How a single request will be answered."""

    domain: RequestDomain
    vision_needed: bool
    knowledge_enabled: bool
    language: str
    safety_notes: tuple[str, ...] = field(default=HARD_SAFETY_RULES)


def plan_request(text: str, *, has_image: bool, language: str = "Italian") -> RequestPlan:
    domain = classify_domain(text)
    return RequestPlan(
        domain=domain,
        vision_needed=has_image,
        knowledge_enabled=domain is not RequestDomain.OTHER,
        language=language,
    )


def build_system_prompt(plan: RequestPlan) -> str:
    """System instructions: persona, mandatory sections and the hard rules."""
    rules = list(HARD_SAFETY_RULES) + list(GOLDEN_RULES)
    lines = [
        "You are ROCCO, an experienced field technician. "
        f"Answer ONLY in {plan.language}.",
        "Reliability protocol: never give a certain diagnosis from incomplete data. "
        "Tag every hypothesis with [CONFIRMED], [PROBABLE] or [UNVERIFIABLE].",
        "MANDATORY format, these sections in this order (title followed by a colon):",
    ]
    lines.extend(f"- {section}:" for section in REPORT_SECTIONS)
    lines.append("")
    lines.append("Hard rules:")
    lines.extend(f"- {rule}" for rule in rules)
    if plan.vision_needed:
        lines.append("")
        lines.append(
            "A photo is attached: describe only what is actually visible, "
            "never guess hidden wiring."
        )
    return "\n".join(lines)


def normalize_history(
    history: Iterable[Any] | None,
    limit: int = 10,
) -> list[ChatMessage]:
    """Keep the last ``limit`` user/assistant turns that carry non-empty text.

    Accepts ``ChatMessage`` objects or mappings with ``role``/``content``.
    """
    turns: list[ChatMessage] = []
    for item in history or ():
        if isinstance(item, ChatMessage):
            role, text = item.role, item.text
        elif isinstance(item, dict):
            role, text = item.get("role"), item.get("content")
        else:
            role, text = getattr(item, "role", None), getattr(item, "content", None)

        if role not in _CHAT_ROLES or not isinstance(text, str) or not text.strip():
            continue
        turns.append(ChatMessage(role=role, content=text.strip()))

    if limit <= 0:
        return []
    return turns[-limit:]


def section_list(sections: Sequence[str] = REPORT_SECTIONS) -> str:
    return " / ".join(sections)
