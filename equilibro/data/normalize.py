"""
Column presence, price formatting, title composition.
"""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from equilibro.config import SUBTITLE_MISSING


# ---------------------------------------------------------------------------
# Column presence
# ---------------------------------------------------------------------------

def ensure_columns(df: pd.DataFrame, columns: Iterable[str], source: str = "input") -> pd.DataFrame:
    """Return a copy with every expected column present and no NaN values.

    Missing columns are added as empty strings so the pipeline never has to
    special-case absent fields.
    """
    df = df.copy()
    missing = [c for c in columns if c not in df.columns]
    if missing and len(df.columns):
        print(f"  Warning: {source} is missing columns {missing} — filled with blanks")
    for col in missing:
        df[col] = ""
    return df.fillna("").astype(str)


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------

def normalize_price(value: str) -> str:
    """Drop quotes and turn the first comma into a decimal point.

    "1,50" -> "1.50". The result is not checked to be numeric.
    """
    return value.replace('"', "").replace(",", ".", 1)


def normalize_prices(prices: pd.Series) -> pd.Series:
    """Vectorized normalize_price."""
    return (
        prices.astype(str)
        .str.replace('"', "", regex=False)
        .str.replace(",", ".", n=1, regex=False)
    )


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

def compose_title(title: str, subtitle: str | None = None) -> str:
    """Join title and subtitle with " - " unless the subtitle is blank or ND.

    Commas become dashes so the value never needs quoting in CSV output.
    """
    if subtitle and subtitle != SUBTITLE_MISSING:
        title = f"{title} - {subtitle}"
    return title.replace(",", "-")


def compose_titles(titles: pd.Series, subtitles: pd.Series) -> pd.Series:
    """Vectorized compose_title."""
    titles = titles.astype(str)
    subtitles = subtitles.astype(str)
    has_subtitle = (subtitles != "") & (subtitles != SUBTITLE_MISSING)
    combined = titles.where(~has_subtitle, titles + " - " + subtitles)
    return combined.str.replace(",", "-", regex=False)
