"""Diagnostic use case — pre-analysis, provider cascade, offline degradation, postcheck."""

from collections.abc import Iterable
from typing import Any

from wirepro.application.services.error_classifier import is_network_error
from wirepro.application.services.knowledge_context import build_knowledge_context
from wirepro.application.services.knowledge_store import KnowledgeStore
from wirepro.application.services.postcheck import extract_confidence_tag, postcheck
from wirepro.application.services.prompt_builder import (
    build_system_prompt,
    normalize_history,
    plan_request,
)
from wirepro.application.services.provider_cascade import ProviderCascade
from wirepro.application.services.report_composer import TEST_CASE, ReportComposer
from wirepro.domain.entities import (
    OFFLINE_MODEL,
    OFFLINE_PROVIDER,
    DiagnosticAnswer,
    DiagnosticReport,
    GenerationRequest,
    ImageAttachment,
)
from wirepro.domain.exceptions import CascadeExhaustedError
from wirepro.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

log = PipelineLogger("DiagnosticService")

NO_TEXT_WITH_IMAGE = "Analyse the attached photo."
NO_TEXT = "(no text)"


class DiagnosticService:
    """Application service — answers one technical request end to end.

    The offline answer replaces the cascade output only when every provider
    failed on connectivity and the request is technical. Any other failure
    propagates to the caller.
    """

    def __init__(
        self,
        composer: ReportComposer,
        cascade: ProviderCascade,
        store: KnowledgeStore,
        *,
        history_limit: int = 10,
        response_language: str = "Italian",
    ):
        self._composer = composer
        self._cascade = cascade
        self._store = store
        self._history_limit = history_limit
        self._response_language = response_language

    def analyze(self, message: str | None, *, has_image: bool = False) -> DiagnosticReport:
        return self._composer.analyze(message, has_image=has_image)

    async def diagnose(
        self,
        message: str | None,
        *,
        image: ImageAttachment | None = None,
        history: Iterable[Any] | None = None,
        requested_provider: str | None = None,
    ) -> DiagnosticAnswer:
        text = str(message or "").strip()
        report = self.analyze(text, has_image=image is not None)
        plan = plan_request(text, has_image=image is not None, language=self._response_language)

        context_blocks = [self._composer.render_context(report)]
        if plan.knowledge_enabled:
            context_blocks.append(build_knowledge_context(self._store, text))

        request = GenerationRequest(
            system_instructions=build_system_prompt(plan),
            user_text=text or (NO_TEXT_WITH_IMAGE if image else NO_TEXT),
            prior_turns=normalize_history(history, self._history_limit),
            image=image,
            context_blocks=[block for block in context_blocks if block],
        )

        try:
            outcome = await self._cascade.generate(request, requested_provider=requested_provider)
        except CascadeExhaustedError as e:
            if not (report.is_technical and is_network_error(e.last_error)):
                raise
            return self._offline_answer(report, e)

        checked = postcheck(outcome.result.content)
        log.step_complete(
            PipelineStage.COMPLETE,
            "Answer ready",
            provider=outcome.provider,
            fallback=outcome.fallback_used,
        )
        return DiagnosticAnswer(
            answer_text=checked.text,
            used_provider=outcome.provider,
            used_model=outcome.model,
            fallback_used=outcome.fallback_used,
            diagnostic_summary=report.to_summary(),
            confidence_tag=extract_confidence_tag(checked.text),
            banned_phrases=checked.banned_phrases,
            attempts=outcome.attempts,
        )

    def _offline_answer(
        self,
        report: DiagnosticReport,
        error: CascadeExhaustedError,
    ) -> DiagnosticAnswer:
        log.step_warning(
            PipelineStage.OFFLINE,
            "No provider reachable, answering from local knowledge",
            tried=len(error.attempts),
        )
        checked = postcheck(self._composer.render_standalone(report), offline=True)
        return DiagnosticAnswer(
            answer_text=checked.text,
            used_provider=OFFLINE_PROVIDER,
            used_model=OFFLINE_MODEL,
            fallback_used=True,
            diagnostic_summary=report.to_summary(),
            confidence_tag=extract_confidence_tag(checked.text),
            banned_phrases=checked.banned_phrases,
            attempts=error.attempts,
        )

    def self_test(self) -> dict[str, Any]:
        """Run the built-in test case through the analysis and both renderings."""
        report = self.analyze(str(TEST_CASE["message"]), has_image=bool(TEST_CASE["has_image"]))
        return {
            "input": dict(TEST_CASE),
            "report": report.to_summary(),
            "observations": list(report.observations),
            "verifications": list(report.verifications),
            "risks": list(report.risks),
            "context": self._composer.render_context(report),
            "offline_answer": self._composer.render_standalone(report),
            "knowledge": self._store.counts(),
        }
