from __future__ import annotations

import re
from typing import Optional

UNKNOWN = "Unknown"

# UTF-8-Umlaute, die als Latin-1/cp1252 gelesen wurden
MOJIBAKE = {
    "Ã¼": "ü",
    "Ãœ": "Ü",
    "Ã¶": "ö",
    "Ã–": "Ö",
    "Ã¤": "ä",
    "Ã„": "Ä",
    "ÃŸ": "ß",
}

_WS = re.compile(r"\s+")


def canonicalize(name: Optional[str]) -> str:
    """Regionsnamen reparieren: '_' -> ' ', Encoding-Artefakte -> Umlaute, Whitespace normieren."""
    if name is None:
        return UNKNOWN
    s = str(name).replace("_", " ")
    for bad, good in MOJIBAKE.items():
        s = s.replace(bad, good)
    s = _WS.sub(" ", s).strip()
    return s or UNKNOWN


def display_name(name: Optional[str]) -> str:
    """Kanonischer Name mit großem Anfangsbuchstaben je Wort (für Achsen/Labels)."""
    return " ".join(w[:1].upper() + w[1:] for w in canonicalize(name).split(" "))
