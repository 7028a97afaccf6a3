"""
FastAPI dependencies — reference data and session store from app state.
"""
from __future__ import annotations

from fastapi import HTTPException, Request

from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData


def get_reference(request: Request) -> ReferenceData:
    ref = getattr(request.app.state, "reference", None)
    if ref is None:
        raise HTTPException(503, "Server not initialized yet")
    return ref


def get_sessions(request: Request) -> SessionStore:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        raise HTTPException(503, "Server not initialized yet")
    return sessions
