"""Abstract knowledge source — port for loading static knowledge collections."""

from abc import ABC, abstractmethod
from typing import Any

# Collection names, in the order the store loads them
KNOWLEDGE_COLLECTIONS: tuple[str, ...] = (
    "components",
    "protection_rules",
    "failure_patterns",
    "safety_protocols",
)


class KnowledgeSource(ABC):
    """Port — yields raw knowledge records for a named collection."""

    @abstractmethod
    def load_collection(self, name: str) -> list[dict[str, Any]]:
        """Return the raw records of ``name``.

        Implementations may raise on any I/O or parse failure; the
        knowledge store recovers per collection.
        """
        ...
