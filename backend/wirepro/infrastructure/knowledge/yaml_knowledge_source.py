"""YAML knowledge source — reads ``<dir>/<collection>.yaml`` files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from wirepro.application.interfaces.knowledge_source import KnowledgeSource

logger = logging.getLogger(__name__)

# Top-level list key inside each collection file
COLLECTION_KEYS: dict[str, str] = {
    "components": "items",
    "protection_rules": "rules",
    "failure_patterns": "patterns",
    "safety_protocols": "protocols",
}


class KnowledgeSourceError(Exception):
    """Raised when a collection file is missing or malformed."""


class YamlKnowledgeSource(KnowledgeSource):
    """Infrastructure adapter — one YAML file per knowledge collection."""

    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    def _load_yaml(self, path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def load_collection(self, name: str) -> list[dict[str, Any]]:
        key = COLLECTION_KEYS.get(name)
        if key is None:
            raise KnowledgeSourceError(f"Unknown knowledge collection: {name}")

        path = self._directory / f"{name}.yaml"
        if not path.is_file():
            raise KnowledgeSourceError(f"Knowledge file not found: {path}")

        try:
            data = self._load_yaml(path)
        except yaml.YAMLError as e:
            raise KnowledgeSourceError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get(key), list):
            raise KnowledgeSourceError(f"{path} has no '{key}' list")

        logger.debug("Loaded %d records from %s", len(data[key]), path)
        return data[key]
