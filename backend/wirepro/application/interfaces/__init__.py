from .chat_provider import ChatProvider, ProviderDescriptor
from .knowledge_source import KNOWLEDGE_COLLECTIONS, KnowledgeSource

__all__ = [
    "ChatProvider",
    "ProviderDescriptor",
    "KNOWLEDGE_COLLECTIONS",
    "KnowledgeSource",
]
