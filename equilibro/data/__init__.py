"""Reference data, CSV codec, report pipeline and session storage."""
from .loader import parse_csv, to_csv, load_csv_file
from .pipeline import group_catalog, project_territory, school_class_counts, build_bundle
from .schemas import ReportKind, SessionBundle
from .sessions import SessionStore
from .store import ReferenceData
