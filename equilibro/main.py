"""
Equilibro — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData
from equilibro.api.router_meta import router as meta_router
from equilibro.api.router_process import router as process_router
from equilibro.api.router_download import router as download_router
from equilibro.api.router_schools import router as schools_router


def create_app(
    reference: Optional[ReferenceData] = None,
    sessions: Optional[SessionStore] = None,
) -> FastAPI:
    """Build the app; tests pass their own reference data and session store."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load reference data and start session expiry."""
        from equilibro.config import DATA_FOLDER

        print(f"  DATA_FOLDER = {DATA_FOLDER}")
        ref = app.state.reference.load()
        store = app.state.sessions.start()

        if ref.row_count() > 0:
            print(f"\nEquilibro ready — {ref.row_count():,} adoption rows, "
                  f"{ref.school_count():,} schools, session TTL {store.ttl:.0f}s\n")
        else:
            print("\nEquilibro ready — no default catalog loaded. Upload a CSV to process.\n")
        try:
            yield
        finally:
            store.stop()

    app = FastAPI(
        title="Equilibro API",
        description="Textbook adoption reports — grouped listings, unique catalog, school territory",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.reference = reference if reference is not None else ReferenceData()
    app.state.sessions = sessions if sessions is not None else SessionStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(process_router)
    app.include_router(download_router)
    app.include_router(schools_router)

    return app


app = create_app()
