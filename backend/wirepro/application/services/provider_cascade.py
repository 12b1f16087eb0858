"""Provider cascade — tries generation providers in priority order until one answers."""

import time
from collections.abc import Sequence

from wirepro.application.interfaces.chat_provider import ProviderDescriptor
from wirepro.application.services.error_classifier import classify_error
from wirepro.domain.entities import CascadeOutcome, GenerationRequest, ProviderAttempt
from wirepro.domain.exceptions import CascadeExhaustedError, ProviderConfigurationError
from wirepro.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

log = PipelineLogger("ProviderCascade")

# Relative order of the remaining providers after the preferred one
PROVIDER_ORDER: tuple[str, ...] = ("openai", "anthropic", "openrouter")


class ProviderCascade:
    """Application service — ordered failover across interchangeable providers.

    ``providers`` pairs each provider name with its adapter and model. The queue is
    rebuilt for every request; nothing here is mutated after construction.
    """

    def __init__(
        self,
        providers: Sequence[ProviderDescriptor],
        *,
        default_provider: str = "openai",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self._providers = {d.name: d for d in providers}
        self._default_provider = default_provider
        self._temperature = temperature
        self._max_tokens = max_tokens

    def available(self) -> list[str]:
        """Configured provider names in fixed relative order."""
        known = [n for n in PROVIDER_ORDER if n in self._providers]
        extra = [n for n in self._providers if n not in PROVIDER_ORDER]
        return [n for n in known + extra if self._providers[n].provider.is_configured()]

    def build_queue(self, requested: str | None = None) -> list[ProviderDescriptor]:
        names = self.available()
        preferred = requested if requested in names else self._default_provider
        if preferred in names:
            names.remove(preferred)
            names.insert(0, preferred)
        return [self._providers[n] for n in names]

    async def generate(
        self,
        request: GenerationRequest,
        *,
        requested_provider: str | None = None,
    ) -> CascadeOutcome:
        """Run the queue; first success wins.

        Raises:
            ProviderConfigurationError: No provider is available.
            CascadeExhaustedError: Every provider failed.
        """
        queue = self.build_queue(requested_provider)
        if not queue:
            log.step_error(PipelineStage.CASCADE, "No generation provider configured")
            raise ProviderConfigurationError()

        messages = request.to_messages()
        attempts: list[ProviderAttempt] = []
        log.step_start(
            PipelineStage.CASCADE,
            "Generating answer",
            queue=",".join(d.name for d in queue),
        )

        for position, descriptor in enumerate(queue):
            attempt = await self._attempt(descriptor, messages)
            attempts.append(attempt)

            if attempt.ok:
                log.step_complete(
                    PipelineStage.CASCADE,
                    f"Answer from {descriptor.name}",
                    model=descriptor.model,
                    fallback=position > 0,
                )
                return CascadeOutcome(
                    result=attempt.result,
                    provider=descriptor.name,
                    model=attempt.result.model or descriptor.model,
                    fallback_used=position > 0,
                    attempts=attempts,
                )

        last_error = attempts[-1].error
        log.step_error(PipelineStage.CASCADE, "All providers failed", error=last_error)
        raise CascadeExhaustedError(attempts, last_error)

    async def _attempt(self, descriptor: ProviderDescriptor, messages) -> ProviderAttempt:
        start = time.monotonic()
        # CancelledError is a BaseException and passes straight through
        try:
            result = await descriptor.provider.complete(
                messages,
                descriptor.model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            kind = classify_error(e)
            log.step_warning(
                PipelineStage.PROVIDER,
                f"{descriptor.name} failed",
                kind=kind.value,
                error=f"{type(e).__name__}: {e}",
                ms=duration_ms,
            )
            return ProviderAttempt(
                provider=descriptor.name,
                model=descriptor.model,
                ok=False,
                error=e,
                error_kind=kind,
                duration_ms=duration_ms,
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        log.detail(f"{descriptor.name} answered", ms=duration_ms, tokens=result.usage.total_tokens)
        return ProviderAttempt(
            provider=descriptor.name,
            model=descriptor.model,
            ok=True,
            result=result,
            duration_ms=duration_ms,
        )
