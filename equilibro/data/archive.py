"""
ZIP packaging of session bundles.
"""
from __future__ import annotations

import io
import zipfile
from typing import Mapping, Union


def build_archive(entries: Mapping[str, Union[str, bytes]]) -> bytes:
    """Pack name -> content pairs into a deflated ZIP, in the given order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()
