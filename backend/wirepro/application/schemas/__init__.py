from .diagnose import (
    DiagnoseRequest,
    DiagnoseResponse,
    EngineTestResponse,
    HistoryTurnSchema,
    ProviderAttemptResponse,
)

__all__ = [
    "DiagnoseRequest",
    "DiagnoseResponse",
    "EngineTestResponse",
    "HistoryTurnSchema",
    "ProviderAttemptResponse",
]
