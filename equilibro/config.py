"""
Equilibro — Configuration: paths, constants, column layouts.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with EQUILIBRO_DATA_DIR env var for deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("EQUILIBRO_DATA_DIR", str(Path.cwd() / "static")))
DATA_FOLDER = _data_dir
SCHOOLS_CSV = _data_dir / "scuolelazio.csv"
OUTPUT_FOLDER = Path(os.environ.get("EQUILIBRO_OUTPUT_DIR", str(_data_dir / "exports")))

# Adoption catalog: first readable candidate wins
_explicit_input = os.environ.get("EQUILIBRO_INPUT_CSV")
INPUT_CSV_CANDIDATES = [
    *([Path(_explicit_input)] if _explicit_input else []),
    Path.cwd().parent / "input.csv",
    _data_dir / "input.csv",
]

# ---------------------------------------------------------------------------
# Session expiry (seconds)
# ---------------------------------------------------------------------------
SESSION_TTL_SECONDS = float(os.environ.get("EQUILIBRO_SESSION_TTL", "300"))
SWEEP_INTERVAL_SECONDS = float(os.environ.get("EQUILIBRO_SWEEP_INTERVAL", "60"))

# ---------------------------------------------------------------------------
# Input columns (adoption catalog + school directory)
# ---------------------------------------------------------------------------
ADOPTION_COLUMNS = [
    "CODICESCUOLA",
    "ANNOCORSO",
    "SEZIONEANNO",
    "CODICEISBN",
    "DISCIPLINA",
    "TITOLO",
    "SOTTOTITOLO",
    "EDITORE",
    "PREZZO",
]

SCHOOL_COLUMNS = ["CODICESCUOLA", "DENOMINAZIONESCUOLA"]

# Subtitle value meaning "not available"
SUBTITLE_MISSING = "ND"

# ---------------------------------------------------------------------------
# Output layouts
# ---------------------------------------------------------------------------
GROUPED_LISTING_COLUMNS = ["CODICEISBN", "CODICESCUOLA_ANNOCORSO_SEZIONEANNO"]

UNIQUE_CATALOG_COLUMNS = [
    "ISBN",
    "Titolo",
    "Materia",
    "Listino",
    "EDITORE",
    "Qta tot",
    "Qta non venduti",
]

TERRITORY_COLUMNS = ["NomeScuola", "CodiceMeccanografico"]

# File-name prefixes inside the archive: <prefix>_<id>.csv
GROUPED_LISTING_PREFIX = "CercaListe"
UNIQUE_CATALOG_PREFIX = "ListeLibri"
TERRITORY_PREFIX = "ScuoleTerritorio"

ARCHIVE_PREFIX = "equilibro_files"
SESSION_ID_LENGTH = 8
