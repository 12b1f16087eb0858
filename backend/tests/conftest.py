"""Shared fixtures built on the knowledge base shipped in backend/data/knowledge."""

from pathlib import Path

import pytest

from wirepro.application.services import KnowledgeMatcher, KnowledgeStore, ReportComposer
from wirepro.infrastructure.knowledge.yaml_knowledge_source import YamlKnowledgeSource

KNOWLEDGE_DIR = Path(__file__).resolve().parents[1] / "data" / "knowledge"


@pytest.fixture(scope="session")
def knowledge_store() -> KnowledgeStore:
    return KnowledgeStore.from_source(YamlKnowledgeSource(KNOWLEDGE_DIR))


@pytest.fixture
def composer(knowledge_store: KnowledgeStore) -> ReportComposer:
    return ReportComposer(KnowledgeMatcher(knowledge_store))
