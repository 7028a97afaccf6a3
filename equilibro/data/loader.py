"""
CSV parsing, serialization and reference file loading.
"""
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

# CRLF keeps the exports friendly to spreadsheet tools
LINE_TERMINATOR = "\r\n"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _read_records(text: str, source: str) -> list[list[str]]:
    """csv.reader over the text, one record at a time.

    A record the reader rejects (NUL byte, field over the size limit) is
    reported and skipped; the rest of the file keeps flowing.
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    records: list[list[str]] = []
    skipped = 0
    while True:
        line_before = reader.line_num
        try:
            record = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            skipped += 1
            print(f"  Warning: {source}: skipping line {reader.line_num}: {exc}")
            if reader.line_num == line_before:
                break
            continue
        # Only truly empty lines are blank; "," is a record of empty fields
        if record in ([], [""]):
            continue
        records.append(record)

    if skipped:
        print(f"  Warning: {source}: {skipped:,} unreadable lines skipped")
    return records


def parse_csv(text: str, source: str = "csv") -> pd.DataFrame:
    """Parse CSV text with a header row into an all-string DataFrame.

    - Header names are stripped of surrounding whitespace.
    - Empty lines are skipped; lines of empty fields are kept.
    - Rows with too many fields are truncated to the header width and
      reported; rows with too few are padded with blanks.
    """
    rows = _read_records(text, source)
    if not rows:
        return pd.DataFrame()

    header = [h.strip() for h in rows[0]]
    width = len(header)

    body: list[list[str]] = []
    short_rows = 0
    long_rows = 0
    for row in rows[1:]:
        if len(row) < width:
            short_rows += 1
            row = row + [""] * (width - len(row))
        elif len(row) > width:
            long_rows += 1
            row = row[:width]
        body.append(row)

    if short_rows:
        print(f"  Warning: {source}: {short_rows:,} rows had fewer than {width} fields — padded")
    if long_rows:
        print(f"  Warning: {source}: {long_rows:,} rows had more than {width} fields — truncated")

    return pd.DataFrame(body, columns=header, dtype=str)


def rows_to_frame(rows: Iterable[dict]) -> pd.DataFrame:
    """Build an all-string DataFrame from already-parsed row mappings.

    Values are stringified one by one so numbers keep their JSON form
    ("1", not "1.0") even when other rows lack the key.
    """
    records = [
        {str(k).strip(): "" if v is None else str(v) for k, v in row.items()}
        for row in rows
    ]
    df = pd.DataFrame.from_records(records)
    if df.empty:
        return df
    return df.fillna("")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def to_csv(df: pd.DataFrame, columns: Sequence[str] | None = None) -> str:
    """Serialize a DataFrame to CSV text with a header row.

    With explicit ``columns`` the output follows that order (missing columns
    are blank); otherwise the frame's own column order is used.
    """
    if columns is not None:
        df = df.reindex(columns=list(columns), fill_value="")
    return df.to_csv(index=False, lineterminator=LINE_TERMINATOR)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def load_csv_file(filepath: Path) -> pd.DataFrame:
    """Read and parse one CSV file; unreadable files yield an empty frame."""
    try:
        text = filepath.read_text(encoding="utf-8-sig")
    except OSError as exc:
        print(f"  Error loading {filepath}: {exc}")
        return pd.DataFrame()
    return parse_csv(text, source=filepath.name)


def load_first_available(candidates: Iterable[Path]) -> tuple[pd.DataFrame, Path | None]:
    """Load the first candidate path that exists and can be read."""
    tried = []
    for path in candidates:
        tried.append(str(path))
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            print(f"  Warning: skipping {path}: {exc}")
            continue
        return parse_csv(text, source=path.name), path

    print(f"  Error loading catalog: none of {tried} could be read")
    return pd.DataFrame(), None
