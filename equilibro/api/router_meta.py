"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData
from equilibro.api.dependencies import get_reference, get_sessions
from equilibro.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(
    ref: ReferenceData = Depends(get_reference),
    sessions: SessionStore = Depends(get_sessions),
):
    return HealthResponse(
        status="ok",
        catalog_rows=ref.row_count(),
        schools=ref.school_count(),
        sessions=len(sessions),
    )
