# src/mietpreis/coercion.py
# Zentrale, typisierte Umwandlung lose getypter Werte (CSV-Strings, Formulareingaben).
from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

QUOTE_CHARS = ('"', "'")
TRUTHY = {"true", "yes"}


def clean_field(value: Any) -> str:
    """Trimmt einen Rohwert und entfernt EIN Paar umschließender Anführungszeichen."""
    if value is None:
        return ""
    s = str(value).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in QUOTE_CHARS:
        s = s[1:-1].strip()
    return s


def parse_float(value: Any) -> Optional[float]:
    """
    Zahl aus einem lose getypten Wert lesen.
    Gibt None zurück, wenn der Wert fehlt, nicht numerisch oder nicht endlich ist.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        f = float(value)
    else:
        s = clean_field(value)
        if not s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
    if not np.isfinite(f):
        return None
    return f


def to_amount(value: Any) -> float:
    """Optionale Beträge/Mengen: ungültig, nicht endlich oder negativ -> 0.0"""
    f = parse_float(value)
    if f is None or f < 0:
        return 0.0
    return f


def to_bool(value: Any) -> bool:
    """True nur für True, 'true', 'yes' (Groß/Klein egal) – alles andere ist False."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return clean_field(value).lower() in TRUTHY


def round_half_up(value: float) -> int:
    # kaufmännisch runden (x.5 -> aufwärts), nicht Python-Bankers-Rounding
    return int(math.floor(value + 0.5))
