"""FastAPI dependency injection — wires infrastructure to application layer."""

from functools import lru_cache

import httpx
from fastapi import Depends, Request

from wirepro.config import Settings, get_settings
from wirepro.application.interfaces.chat_provider import ProviderDescriptor
from wirepro.application.services import (
    DiagnosticService,
    KnowledgeMatcher,
    KnowledgeStore,
    KnowledgeStoreLoader,
    ProviderCascade,
    ReportComposer,
)
from wirepro.infrastructure.knowledge.yaml_knowledge_source import YamlKnowledgeSource
from wirepro.infrastructure.llm import AnthropicClient, OpenAIClient, OpenRouterClient


@lru_cache
def get_knowledge_loader() -> KnowledgeStoreLoader:
    """Process-wide lazy loader for the knowledge base."""
    settings = get_settings()
    return KnowledgeStoreLoader(lambda: YamlKnowledgeSource(settings.knowledge_path))


def get_knowledge_store(request: Request) -> KnowledgeStore:
    """The store preloaded by the lifespan, or the lazy loader when it did not run."""
    store = getattr(request.app.state, "knowledge_store", None)
    if store is not None:
        return store
    return get_knowledge_loader().get()


def build_providers(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> list[ProviderDescriptor]:
    """All known providers; unconfigured ones are skipped by the cascade."""
    timeout = settings.provider_timeout_s
    return [
        ProviderDescriptor(
            name="openai",
            provider=OpenAIClient(
                api_key=settings.openai_api_key.strip(),
                base_url=settings.openai_base_url,
                timeout=timeout,
                http_client=http_client,
            ),
            model=settings.openai_model,
        ),
        ProviderDescriptor(
            name="anthropic",
            provider=AnthropicClient(
                api_key=settings.anthropic_api_key.strip(),
                base_url=settings.anthropic_base_url,
                api_version=settings.anthropic_version,
                timeout=timeout,
                http_client=http_client,
            ),
            model=settings.anthropic_model,
        ),
        ProviderDescriptor(
            name="openrouter",
            provider=OpenRouterClient(
                api_key=settings.openrouter_api_key.strip(),
                base_url=settings.openrouter_base_url,
                app_name=settings.openrouter_app_name,
                timeout=timeout,
                http_client=http_client,
            ),
            model=settings.openrouter_model,
        ),
    ]


def build_diagnostic_service(
    store: KnowledgeStore,
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> DiagnosticService:
    matcher = KnowledgeMatcher(store, mandatory_rule_ids=settings.mandatory_rule_ids)
    cascade = ProviderCascade(
        build_providers(settings, http_client),
        default_provider=settings.default_provider,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
    return DiagnosticService(
        composer=ReportComposer(matcher),
        cascade=cascade,
        store=store,
        history_limit=settings.history_limit,
        response_language=settings.response_language,
    )


def get_diagnostic_service(
    store: KnowledgeStore = Depends(get_knowledge_store),
) -> DiagnosticService:
    """Provides a DiagnosticService wired to the shared knowledge store."""
    return build_diagnostic_service(store, get_settings())
