"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    catalog_rows: int
    schools: int
    sessions: int


class ProcessRequest(BaseModel):
    schools: Optional[list[str]] = None
    # Raw adoption rows; the default catalog is used when omitted
    rows: Optional[list[dict[str, Any]]] = None


class ProcessResponse(BaseModel):
    zipFile: str = Field(..., examples=["equilibro_files_1a2b3c4d.zip"])
    unique_id: str
