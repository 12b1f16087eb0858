"""Diagnose endpoint — technical request in, validated structured report out."""

from fastapi import APIRouter, Depends, HTTPException, status

from wirepro.application.schemas import (
    DiagnoseRequest,
    DiagnoseResponse,
    ProviderAttemptResponse,
)
from wirepro.application.services import DiagnosticService
from wirepro.domain.entities import ImageAttachment
from wirepro.domain.exceptions import CascadeExhaustedError, ProviderConfigurationError
from wirepro.infrastructure.dependencies import get_diagnostic_service

router = APIRouter(prefix="/diagnose", tags=["Diagnostics"])


@router.post("", response_model=DiagnoseResponse)
async def diagnose(
    request: DiagnoseRequest,
    service: DiagnosticService = Depends(get_diagnostic_service),
) -> DiagnoseResponse:
    """Answer a technical request with the six-section diagnostic report.

    Falls back to the offline knowledge-only answer when no provider is
    reachable and the request is technical.
    """
    image = None
    split = request.split_image()
    if split is not None:
        data, mime_type = split
        image = ImageAttachment(data_base64=data, mime_type=mime_type)

    try:
        answer = await service.diagnose(
            request.message,
            image=image,
            history=[turn.model_dump() for turn in request.history],
            requested_provider=request.provider,
        )
    except ProviderConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )
    except CascadeExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    return DiagnoseResponse(
        answer_text=answer.answer_text,
        used_provider=answer.used_provider,
        used_model=answer.used_model,
        fallback_used=answer.fallback_used,
        confidence=answer.confidence_tag,
        diagnostic_summary=answer.diagnostic_summary,
        banned_phrases=answer.banned_phrases,
        attempts=[ProviderAttemptResponse(**a.describe()) for a in answer.attempts],
    )
