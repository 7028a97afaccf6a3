"""
Catalog grouping and territory projection — the three report tables.
"""
from __future__ import annotations

from typing import Collection, Optional, Sequence

import pandas as pd

from equilibro.config import (
    ADOPTION_COLUMNS, SCHOOL_COLUMNS,
    GROUPED_LISTING_COLUMNS, UNIQUE_CATALOG_COLUMNS, TERRITORY_COLUMNS,
)
from equilibro.data.loader import to_csv
from equilibro.data.normalize import ensure_columns, normalize_prices, compose_titles
from equilibro.data.schemas import SessionBundle


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def select_schools(df: pd.DataFrame, selection: Optional[Collection[str]]) -> pd.DataFrame:
    """Keep rows whose CODICESCUOLA is selected; ``None`` keeps everything."""
    if selection is None:
        return df
    return df[df["CODICESCUOLA"].isin(selection)]


# ---------------------------------------------------------------------------
# Grouping engine
# ---------------------------------------------------------------------------

def group_catalog(
    rows: pd.DataFrame,
    selection: Optional[set[str]] = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Build the grouped listing (CercaListe) and unique catalog (ListeLibri).

    Both tables have one row per distinct CODICEISBN in the selected rows,
    ordered by first appearance. The unique catalog takes every field from
    the first row seen for an ISBN; later duplicates are ignored.
    """
    df = select_schools(ensure_columns(rows, ADOPTION_COLUMNS), selection)

    if df.empty:
        return (
            pd.DataFrame(columns=GROUPED_LISTING_COLUMNS),
            pd.DataFrame(columns=UNIQUE_CATALOG_COLUMNS),
        )

    # "<school>_<year><section>" labels joined per ISBN
    labels = df["CODICESCUOLA"] + "_" + df["ANNOCORSO"] + df["SEZIONEANNO"]
    grouped = labels.groupby(df["CODICEISBN"], sort=False).agg(", ".join)
    grouped_listing = pd.DataFrame({
        "CODICEISBN": grouped.index.astype(str),
        "CODICESCUOLA_ANNOCORSO_SEZIONEANNO": grouped.to_numpy(),
    })

    # First occurrence per ISBN
    first = df.drop_duplicates(subset="CODICEISBN", keep="first")
    unique_catalog = pd.DataFrame({
        "ISBN": first["CODICEISBN"].to_numpy(),
        "Titolo": compose_titles(first["TITOLO"], first["SOTTOTITOLO"]).to_numpy(),
        "Materia": first["DISCIPLINA"].to_numpy(),
        "Listino": normalize_prices(first["PREZZO"]).to_numpy(),
        "EDITORE": first["EDITORE"].to_numpy(),
        "Qta tot": "",
        "Qta non venduti": "",
    }, columns=UNIQUE_CATALOG_COLUMNS)

    return grouped_listing, unique_catalog


# ---------------------------------------------------------------------------
# Territory projector
# ---------------------------------------------------------------------------

def project_territory(
    schools: pd.DataFrame,
    selection: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """One ScuoleTerritorio row per selected school: "<name> - <code>", code."""
    df = ensure_columns(schools, SCHOOL_COLUMNS, source="school directory")
    if selection is not None:
        df = df[df["CODICESCUOLA"].isin(list(selection))]

    return pd.DataFrame({
        "NomeScuola": (df["DENOMINAZIONESCUOLA"] + " - " + df["CODICESCUOLA"]).to_numpy(),
        "CodiceMeccanografico": df["CODICESCUOLA"].to_numpy(),
    }, columns=TERRITORY_COLUMNS)


# ---------------------------------------------------------------------------
# Class counts
# ---------------------------------------------------------------------------

def school_class_counts(rows: pd.DataFrame) -> dict[str, int]:
    """Distinct classes (ANNOCORSO + SEZIONEANNO) adopting books, per school."""
    df = ensure_columns(rows, ADOPTION_COLUMNS)
    df = df[df["CODICESCUOLA"] != ""]
    if df.empty:
        return {}

    class_id = df["ANNOCORSO"] + df["SEZIONEANNO"]
    class_id = class_id.where(class_id.str.strip() != "")
    counts = class_id.groupby(df["CODICESCUOLA"], sort=False).nunique()
    return {str(code): int(n) for code, n in counts.items()}


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------

def normalize_selection(codes: Optional[Sequence[str]]) -> Optional[list[str]]:
    """Blank codes are dropped; an empty selection means "all schools"."""
    if codes is None:
        return None
    cleaned = [c.strip() for c in codes if c and c.strip()]
    return cleaned or None


def build_bundle(
    rows: pd.DataFrame,
    schools: pd.DataFrame,
    selection: Optional[Sequence[str]] = None,
) -> SessionBundle:
    """Run all three reports and serialize them.

    Nothing is returned unless every table was produced.
    """
    selection = normalize_selection(selection)
    selected_set = set(selection) if selection is not None else None

    grouped_listing, unique_catalog = group_catalog(rows, selected_set)
    territory = project_territory(schools, selection)

    return SessionBundle(
        grouped_listing=to_csv(grouped_listing, GROUPED_LISTING_COLUMNS),
        unique_catalog=to_csv(unique_catalog, UNIQUE_CATALOG_COLUMNS),
        territory=to_csv(territory, TERRITORY_COLUMNS),
    )
