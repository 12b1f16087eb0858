"""Unit tests for the provider cascade."""

import asyncio

import pytest

from tests.fakes import FakeProvider, descriptor, network_error
from wirepro.application.services import ProviderCascade
from wirepro.domain.entities import GenerationRequest
from wirepro.domain.exceptions import (
    CascadeExhaustedError,
    ChatProviderError,
    ErrorKind,
    ProviderConfigurationError,
)

REQUEST = GenerationRequest(system_instructions="sys", user_text="Il contattore ronza")


def _cascade(*providers, default="openai"):
    return ProviderCascade([descriptor(p) for p in providers], default_provider=default)


def test_queue_puts_requested_provider_first():
    cascade = _cascade(FakeProvider("openai"), FakeProvider("anthropic"), FakeProvider("openrouter"))

    assert [d.name for d in cascade.build_queue("openrouter")] == ["openrouter", "openai", "anthropic"]
    assert [d.name for d in cascade.build_queue(None)] == ["openai", "anthropic", "openrouter"]


def test_queue_falls_back_to_default_for_unknown_request():
    cascade = _cascade(FakeProvider("openai"), FakeProvider("anthropic"), default="anthropic")

    assert [d.name for d in cascade.build_queue("mistral")] == ["anthropic", "openai"]


def test_queue_skips_unconfigured_providers():
    cascade = _cascade(
        FakeProvider("openai", configured=False),
        FakeProvider("anthropic"),
        FakeProvider("openrouter"),
    )

    assert cascade.available() == ["anthropic", "openrouter"]
    assert [d.name for d in cascade.build_queue("openai")] == ["anthropic", "openrouter"]


@pytest.mark.asyncio
async def test_first_success_wins():
    openai = FakeProvider("openai", answer="ok")
    anthropic = FakeProvider("anthropic", answer="never")
    cascade = _cascade(openai, anthropic)

    outcome = await cascade.generate(REQUEST)

    assert outcome.provider == "openai"
    assert outcome.model == "openai-model-served"
    assert outcome.result.content == "ok"
    assert not outcome.fallback_used
    assert anthropic.calls == []


@pytest.mark.asyncio
async def test_requested_provider_failure_falls_back():
    openai = FakeProvider("openai", answer="from openai")
    anthropic = FakeProvider("anthropic", error=ChatProviderError("anthropic", 529, "overloaded"))
    cascade = _cascade(openai, anthropic)

    outcome = await cascade.generate(REQUEST, requested_provider="anthropic")

    assert outcome.provider == "openai"
    assert outcome.fallback_used
    assert [(a.provider, a.ok) for a in outcome.attempts] == [("anthropic", False), ("openai", True)]
    assert outcome.attempts[0].error_kind is ErrorKind.PROVIDER


@pytest.mark.asyncio
async def test_every_provider_receives_the_same_messages():
    openai = FakeProvider("openai", error=network_error("openai"))
    anthropic = FakeProvider("anthropic", answer="ok")
    cascade = _cascade(openai, anthropic)

    await cascade.generate(REQUEST)

    assert openai.calls[0] == anthropic.calls[0]
    assert openai.calls[0][0].role == "system"
    assert openai.calls[0][-1].content == "Il contattore ronza"


@pytest.mark.asyncio
async def test_exhaustion_reports_last_error():
    last = network_error("openrouter")
    cascade = _cascade(
        FakeProvider("openai", error=ChatProviderError("openai", 500, "boom")),
        FakeProvider("openrouter", error=last),
    )

    with pytest.raises(CascadeExhaustedError) as exc_info:
        await cascade.generate(REQUEST)

    assert exc_info.value.last_error is last
    assert [a.provider for a in exc_info.value.attempts] == ["openai", "openrouter"]
    assert [a.error_kind for a in exc_info.value.attempts] == [ErrorKind.PROVIDER, ErrorKind.NETWORK]


@pytest.mark.asyncio
async def test_no_configured_provider():
    cascade = _cascade(FakeProvider("openai", configured=False))

    with pytest.raises(ProviderConfigurationError):
        await cascade.generate(REQUEST)


@pytest.mark.asyncio
async def test_cancellation_stops_the_cascade():
    openai = FakeProvider("openai", error=asyncio.CancelledError())
    anthropic = FakeProvider("anthropic", answer="never")
    cascade = _cascade(openai, anthropic)

    with pytest.raises(asyncio.CancelledError):
        await cascade.generate(REQUEST)

    assert anthropic.calls == []


def test_attempt_description_is_serializable():
    attempt_error = network_error("openai")
    cascade = _cascade(FakeProvider("openai", error=attempt_error))

    with pytest.raises(CascadeExhaustedError) as exc_info:
        asyncio.run(cascade.generate(REQUEST))

    described = exc_info.value.attempts[0].describe()
    assert described["provider"] == "openai"
    assert described["ok"] is False
    assert described["error_kind"] == "network"
    assert "Connection refused" in described["error"]
