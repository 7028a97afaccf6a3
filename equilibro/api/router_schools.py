"""
School directory endpoints: filtered listing and per-school class counts.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from equilibro.data.store import ReferenceData
from equilibro.api.dependencies import get_reference

router = APIRouter(prefix="/api", tags=["schools"])


@router.get("/schools")
def list_schools(request: Request, ref: ReferenceData = Depends(get_reference)):
    """School directory rows, filtered by any column: ?PROVINCIA=roma|latina."""
    filters = {k: v for k, v in request.query_params.items() if v}
    return ref.filter_schools(filters).to_dict(orient="records")


@router.get("/school-book-data")
def school_book_data(ref: ReferenceData = Depends(get_reference)):
    """{CODICESCUOLA: number of distinct classes with adoptions}."""
    return ref.school_class_counts()
