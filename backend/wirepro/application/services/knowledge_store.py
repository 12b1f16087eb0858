"""Knowledge store — immutable, process-wide view of the static knowledge base.

The store is built once from a ``KnowledgeSource`` and shared read-only by
every request. A failing collection degrades to empty; it never prevents
the others from loading.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from wirepro.application.interfaces.knowledge_source import KNOWLEDGE_COLLECTIONS, KnowledgeSource
from wirepro.domain.entities import (
    Component,
    FailurePattern,
    KnowledgeEntry,
    ProtectionRule,
    SafetyProtocol,
)
from wirepro.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

log = PipelineLogger("KnowledgeStore")

E = TypeVar("E", bound=KnowledgeEntry)

# Collection name (also the store field) -> record factory
_FACTORIES: dict[str, Callable[[dict[str, Any]], KnowledgeEntry]] = {
    "components": Component.from_dict,
    "protection_rules": ProtectionRule.from_dict,
    "failure_patterns": FailurePattern.from_dict,
    "safety_protocols": SafetyProtocol.from_dict,
}


@dataclass(frozen=True)
class KnowledgeStore:
    """The four knowledge collections, in source order."""

    components: tuple[Component, ...] = ()
    protection_rules: tuple[ProtectionRule, ...] = ()
    failure_patterns: tuple[FailurePattern, ...] = ()
    safety_protocols: tuple[SafetyProtocol, ...] = ()

    @classmethod
    def from_source(cls, source: KnowledgeSource) -> "KnowledgeStore":
        with log.timed_step(PipelineStage.KNOWLEDGE, "Loading knowledge base"):
            store = cls(**{
                name: _load(source, name, _FACTORIES[name]) for name in KNOWLEDGE_COLLECTIONS
            })
            log.detail("Collections loaded", **store.counts())
        return store

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in KNOWLEDGE_COLLECTIONS}

    @property
    def is_empty(self) -> bool:
        return not any(self.counts().values())

    def find_rule(self, rule_id: str) -> ProtectionRule | SafetyProtocol | None:
        """Resolve an id among protection rules first, then safety protocols."""
        for rule in self.protection_rules:
            if rule.id == rule_id:
                return rule
        for protocol in self.safety_protocols:
            if protocol.id == rule_id:
                return protocol
        return None


def _load(
    source: KnowledgeSource,
    name: str,
    factory: Callable[[dict[str, Any]], E],
) -> tuple[E, ...]:
    try:
        records = source.load_collection(name)
    except Exception as e:
        log.step_warning(
            PipelineStage.KNOWLEDGE,
            f"Collection '{name}' unavailable, continuing with none",
            error=f"{type(e).__name__}: {e}",
        )
        return ()

    if not isinstance(records, list):
        log.step_warning(PipelineStage.KNOWLEDGE, f"Collection '{name}' is not a list")
        return ()

    entries = []
    for record in records:
        if not isinstance(record, dict):
            log.detail(f"Skipping malformed record in '{name}'", record=repr(record)[:60])
            continue
        entries.append(factory(record))
    return tuple(entries)


class KnowledgeStoreLoader:
    """Idempotent lazy initializer for the shared ``KnowledgeStore``.

    ``get()`` may be called from any thread; the source is read at most once.
    """

    def __init__(self, source_factory: Callable[[], KnowledgeSource]):
        self._source_factory = source_factory
        self._store: KnowledgeStore | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._store is not None

    def get(self) -> KnowledgeStore:
        store = self._store
        if store is not None:
            return store
        with self._lock:
            if self._store is None:
                self._store = KnowledgeStore.from_source(self._source_factory())
            return self._store
