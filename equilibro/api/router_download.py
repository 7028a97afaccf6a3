"""
Download endpoints: full ZIP archive or a single report CSV.

Bundles stay available until they expire, so the same session can be
downloaded several times and file by file.
"""
from __future__ import annotations

import io
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse

from equilibro.config import SESSION_ID_LENGTH
from equilibro.data.archive import build_archive
from equilibro.data.schemas import ReportKind, archive_name
from equilibro.data.sessions import SessionStore
from equilibro.api.dependencies import get_sessions

router = APIRouter(prefix="/api", tags=["download"])

_FILENAME_RE = re.compile(
    r"^(" + "|".join(k.value for k in ReportKind) + r")_([a-zA-Z0-9]{%d})\.csv$" % SESSION_ID_LENGTH,
    re.IGNORECASE,
)


@router.get("/download-zip/{session_id}")
def download_zip(session_id: str, sessions: SessionStore = Depends(get_sessions)):
    """All three reports as equilibro_files_<id>.zip."""
    if session_id.endswith(".zip"):
        session_id = session_id[: -len(".zip")]

    bundle = sessions.get(session_id)
    if bundle is None:
        raise HTTPException(404, "File not found or expired")

    try:
        payload = build_archive(bundle.files(session_id))
    except Exception as exc:
        print(f"  Archive error for {session_id}: {exc!r}")
        raise HTTPException(500, "Internal server error") from exc

    return StreamingResponse(
        io.BytesIO(payload),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive_name(session_id)}"'},
    )


@router.get("/download/{filename}")
def download_file(filename: str, sessions: SessionStore = Depends(get_sessions)):
    """One report as <kind>_<id>.csv."""
    m = _FILENAME_RE.match(filename)
    if not m:
        raise HTTPException(404, "File not found")

    kind = ReportKind.from_prefix(m.group(1))
    session_id = m.group(2)

    bundle = sessions.get(session_id)
    if bundle is None or kind is None:
        raise HTTPException(404, "File not found or expired")

    return Response(
        content=bundle.content(kind),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
