"""Domain entities for the static technical knowledge base.

Entries are loaded once from configuration and never mutated at runtime.
Every list field defaults to an empty tuple, never ``None``.
"""

from dataclasses import dataclass
from typing import Any


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_list(value: Any) -> tuple[str, ...]:
    """Coerce a raw configuration value into a tuple of strings."""
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if item is not None)


def _as_logic(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class KnowledgeEntry:
    """Base for all knowledge entries — identity is an opaque string id."""

    id: str


@dataclass(frozen=True)
class Component(KnowledgeEntry):
    """A catalogued component (relay, RCD, thermostat, smart switch, ...)."""

    brand: str = ""
    model: str = ""
    notes: str = ""
    keywords: tuple[str, ...] = ()
    typical_faults: tuple[str, ...] = ()
    field_checks: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Component":
        return cls(
            id=_as_text(data.get("id")),
            brand=_as_text(data.get("brand")),
            model=_as_text(data.get("model")),
            notes=_as_text(data.get("notes")),
            keywords=_as_list(data.get("keywords")),
            typical_faults=_as_list(data.get("typical_faults")),
            field_checks=_as_list(data.get("field_checks")),
        )


@dataclass(frozen=True)
class FailurePattern(KnowledgeEntry):
    """A known failure symptom with its likely causes and field checks.

    ``confidence_logic[i]`` describes how ``likely_causes[i]`` could be
    confirmed or why it cannot be verified.
    """

    symptom: str = ""
    likely_causes: tuple[str, ...] = ()
    checks: tuple[str, ...] = ()
    confidence_logic: tuple[str, ...] = ()
    example_case: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FailurePattern":
        raw_causes = data.get("likely_causes")
        raw_logic = data.get("confidence_logic")
        if not isinstance(raw_causes, (list, tuple)):
            raw_causes = ()
        if not isinstance(raw_logic, (list, tuple)):
            raw_logic = ()

        # Malformed logic stays in place as ""; a dropped cause takes its logic with it
        causes: list[str] = []
        logic: list[str] = []
        for index, cause in enumerate(raw_causes):
            if cause is None:
                continue
            causes.append(str(cause))
            if index < len(raw_logic):
                logic.append(_as_logic(raw_logic[index]))
        if not raw_causes:
            # The symptom stands in as the only cause
            logic = [_as_logic(item) for item in raw_logic]

        return cls(
            id=_as_text(data.get("id")),
            symptom=_as_text(data.get("symptom")),
            likely_causes=tuple(causes),
            checks=_as_list(data.get("checks")),
            confidence_logic=tuple(logic),
            example_case=_as_text(data.get("example_case")),
        )


@dataclass(frozen=True)
class ProtectionRule(KnowledgeEntry):
    """A protection/installation rule with its applicability and risk level."""

    title: str = ""
    when_to_apply: str = ""
    rule: str = ""
    risk_level: str = "medium"  # "low" | "medium" | "high"
    if_seen_in_photo: tuple[str, ...] = ()
    verification_steps: tuple[str, ...] = ()

    @property
    def body(self) -> str:
        return self.rule

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level.lower() == "high"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProtectionRule":
        return cls(
            id=_as_text(data.get("id")),
            title=_as_text(data.get("title")),
            when_to_apply=_as_text(data.get("when_to_apply")),
            rule=_as_text(data.get("rule")),
            risk_level=_as_text(data.get("risk_level")) or "medium",
            if_seen_in_photo=_as_list(data.get("if_seen_in_photo")),
            verification_steps=_as_list(data.get("verification_steps")),
        )


@dataclass(frozen=True)
class SafetyProtocol(KnowledgeEntry):
    """A safety protocol (lockout/tagout, isolation, stop conditions).

    Safety protocols are always treated as high-risk when they end up in a
    rule result set.
    """

    title: str = ""
    pre_checks: tuple[str, ...] = ()
    lockout_tagout: tuple[str, ...] = ()
    stop_conditions: tuple[str, ...] = ()

    risk_level = "high"
    is_high_risk = True

    @property
    def body(self) -> str:
        return "; ".join(self.lockout_tagout or self.pre_checks)

    @property
    def verification_steps(self) -> tuple[str, ...]:
        return self.pre_checks

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SafetyProtocol":
        return cls(
            id=_as_text(data.get("id")),
            title=_as_text(data.get("title")),
            pre_checks=_as_list(data.get("pre_checks")),
            lockout_tagout=_as_list(data.get("lockout_tagout")),
            stop_conditions=_as_list(data.get("stop_conditions")),
        )
