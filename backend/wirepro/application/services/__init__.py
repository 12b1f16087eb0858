from .diagnostic_service import DiagnosticService
from .knowledge_matcher import KnowledgeMatcher
from .knowledge_store import KnowledgeStore, KnowledgeStoreLoader
from .provider_cascade import ProviderCascade
from .report_composer import ReportComposer

__all__ = [
    "DiagnosticService",
    "KnowledgeMatcher",
    "KnowledgeStore",
    "KnowledgeStoreLoader",
    "ProviderCascade",
    "ReportComposer",
]
