"""
ReferenceData — load-once cache of the adoption catalog and school directory.

Loaded at startup (or on first access), then served from memory; files are
never re-read for the lifetime of the process.
"""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from equilibro.config import INPUT_CSV_CANDIDATES, SCHOOLS_CSV, ADOPTION_COLUMNS, SCHOOL_COLUMNS
from equilibro.data.loader import load_csv_file, load_first_available
from equilibro.data.normalize import ensure_columns
from equilibro.data.pipeline import school_class_counts


class ReferenceData:
    """In-memory catalog and school directory."""

    def __init__(
        self,
        input_paths: Sequence[Path] = tuple(INPUT_CSV_CANDIDATES),
        schools_path: Path = SCHOOLS_CSV,
    ) -> None:
        self.input_paths = list(input_paths)
        self.schools_path = schools_path
        self.catalog_path: Optional[Path] = None
        self._catalog: pd.DataFrame = pd.DataFrame()
        self._schools: pd.DataFrame = pd.DataFrame()
        self._class_counts: Optional[dict[str, int]] = None
        self._lock = threading.Lock()
        self._loaded = False

    @classmethod
    def from_frames(cls, catalog: pd.DataFrame, schools: pd.DataFrame) -> "ReferenceData":
        """Build an already-loaded instance from in-memory frames."""
        ref = cls(input_paths=[], schools_path=Path())
        ref._catalog = ensure_columns(catalog, ADOPTION_COLUMNS, source="catalog")
        ref._schools = ensure_columns(schools, SCHOOL_COLUMNS, source="school directory")
        ref._loaded = True
        return ref

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "ReferenceData":
        """Read both files once; later calls are no-ops."""
        with self._lock:
            if self._loaded:
                return self

            print("Loading reference data...")
            catalog, self.catalog_path = load_first_available(self.input_paths)
            self._catalog = ensure_columns(catalog, ADOPTION_COLUMNS, source="catalog")
            if self.catalog_path is not None:
                print(f"  Catalog: {self.catalog_path} ({len(self._catalog):,} rows)")

            schools = load_csv_file(self.schools_path)
            self._schools = ensure_columns(schools, SCHOOL_COLUMNS, source="school directory")
            print(f"  Schools: {self.schools_path.name} ({len(self._schools):,} rows)")

            self._loaded = True
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> pd.DataFrame:
        if not self._loaded:
            self.load()
        return self._catalog

    @property
    def schools(self) -> pd.DataFrame:
        if not self._loaded:
            self.load()
        return self._schools

    def school_class_counts(self) -> dict[str, int]:
        """Distinct adopting classes per school, computed once."""
        if self._class_counts is None:
            self._class_counts = school_class_counts(self.catalog)
        return self._class_counts

    def filter_schools(self, filters: dict[str, str]) -> pd.DataFrame:
        """Filter the school directory by column values.

        Each filter value is a "|"-separated list matched case-insensitively;
        a school passes a filter when its column value is one of the listed
        values. Filters combine with AND. Unknown columns match nothing.
        """
        df = self.schools
        for key, value in filters.items():
            if not value:
                continue
            values = [v.strip().lower() for v in value.split("|")]
            values = [v for v in values if v]
            if not values:
                continue
            if key not in df.columns:
                df = df.iloc[0:0]
                continue
            df = df[df[key].astype(str).str.lower().isin(values)]
        return df

    def row_count(self) -> int:
        return len(self.catalog)

    def school_count(self) -> int:
        return len(self.schools)
