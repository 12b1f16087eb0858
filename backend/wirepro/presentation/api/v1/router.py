"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from wirepro.presentation.api.v1.endpoints.health import router as health_router
from wirepro.presentation.api.v1.endpoints.diagnose import router as diagnose_router
from wirepro.presentation.api.v1.endpoints.engine import router as engine_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(diagnose_router)
router.include_router(engine_router)
