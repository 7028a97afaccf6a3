"""
Session bundle and report-kind schemas.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from equilibro.config import (
    ARCHIVE_PREFIX, GROUPED_LISTING_PREFIX, UNIQUE_CATALOG_PREFIX, TERRITORY_PREFIX,
)


class ReportKind(str, Enum):
    GROUPED_LISTING = GROUPED_LISTING_PREFIX
    UNIQUE_CATALOG = UNIQUE_CATALOG_PREFIX
    TERRITORY = TERRITORY_PREFIX

    @classmethod
    def from_prefix(cls, prefix: str) -> Optional["ReportKind"]:
        """Case-insensitive lookup by file-name prefix."""
        for kind in cls:
            if kind.value.lower() == prefix.lower():
                return kind
        return None

    def filename(self, session_id: str) -> str:
        return f"{self.value}_{session_id}.csv"


@dataclass(frozen=True)
class SessionBundle:
    """The three serialized report tables produced by one processing run."""
    grouped_listing: str
    unique_catalog: str
    territory: str
    created_at: float = field(default=0.0, compare=False)

    def content(self, kind: ReportKind) -> str:
        if kind is ReportKind.GROUPED_LISTING:
            return self.grouped_listing
        if kind is ReportKind.UNIQUE_CATALOG:
            return self.unique_catalog
        return self.territory

    def files(self, session_id: str) -> dict[str, str]:
        """Archive entries in fixed order: name -> CSV text."""
        return {kind.filename(session_id): self.content(kind) for kind in ReportKind}


def archive_name(session_id: str) -> str:
    return f"{ARCHIVE_PREFIX}_{session_id}.zip"
