"""URL slug helpers for directory entries."""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(*parts: str) -> str:
    """'Fort McHenry', 'Baltimore' → 'fort-mchenry-baltimore'."""
    joined = " ".join(p for p in parts if p)
    ascii_text = unicodedata.normalize("NFKD", joined).encode("ascii", "ignore").decode()
    return _NON_ALNUM.sub("-", ascii_text.lower().replace("&", " and ")).strip("-")
