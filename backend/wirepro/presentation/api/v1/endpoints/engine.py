"""Engine self-test endpoint — runs the built-in case through the analysis."""

from fastapi import APIRouter, Depends

from wirepro.application.schemas import EngineTestResponse
from wirepro.application.services import DiagnosticService
from wirepro.infrastructure.dependencies import get_diagnostic_service

router = APIRouter(prefix="/engine", tags=["Diagnostics"])


@router.get("/test", response_model=EngineTestResponse)
async def engine_test(
    service: DiagnosticService = Depends(get_diagnostic_service),
) -> EngineTestResponse:
    """Pre-analysis, context view and offline answer for the built-in RCD case."""
    return EngineTestResponse(**service.self_test())
