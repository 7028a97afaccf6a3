"""
Processing endpoints: run the three reports and park them in a session.
"""
from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from equilibro.data.loader import parse_csv, rows_to_frame
from equilibro.data.pipeline import build_bundle
from equilibro.data.schemas import archive_name
from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData
from equilibro.api.dependencies import get_reference, get_sessions
from equilibro.api.response_models import ProcessRequest, ProcessResponse

router = APIRouter(prefix="/api", tags=["process"])


def run_processing(
    rows: pd.DataFrame,
    ref: ReferenceData,
    sessions: SessionStore,
    selection: Optional[Sequence[str]],
) -> ProcessResponse:
    """Build all reports, then store them under a fresh session id."""
    try:
        bundle = build_bundle(rows, ref.schools, selection)
    except Exception as exc:
        print(f"  Processing error: {exc!r}")
        raise HTTPException(500, "Processing failed") from exc

    session_id = sessions.new_id()
    sessions.put(session_id, bundle)
    print(f"  Stored bundle {session_id}")
    return ProcessResponse(zipFile=archive_name(session_id), unique_id=session_id)


@router.post("/process", response_model=ProcessResponse)
def process(
    req: ProcessRequest,
    ref: ReferenceData = Depends(get_reference),
    sessions: SessionStore = Depends(get_sessions),
):
    """Process the default catalog (or the posted rows) for the selected schools."""
    rows = rows_to_frame(req.rows) if req.rows is not None else ref.catalog
    return run_processing(rows, ref, sessions, req.schools)


@router.post("/process/upload", response_model=ProcessResponse)
async def process_upload(
    file: UploadFile = File(...),
    schools: Optional[str] = Form(None),
    ref: ReferenceData = Depends(get_reference),
    sessions: SessionStore = Depends(get_sessions),
):
    """Process an uploaded adoption CSV; ``schools`` is comma-separated."""
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(400, f"Only .csv files are accepted (got '{file.filename}')")

    raw = await file.read()
    text = raw.decode("utf-8-sig", errors="replace")
    rows = parse_csv(text, source=file.filename)

    selection = schools.split(",") if schools else None
    return run_processing(rows, ref, sessions, selection)
