# src/mietpreis/config.py
"""Zentrale Konfiguration (per .env / Umgebungsvariablen überschreibbar)."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# --- Daten / DB ---
DATA_CSV_PATH = os.getenv("DATA_CSV_PATH", str(PROJECT_ROOT / "data" / "immo_data.csv"))
DB_PATH = os.getenv("DB_PATH", "./data/mietpreis.db")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{Path(DB_PATH)}")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Modell ---
DEFAULT_COEFFICIENT_SET = "standard"
DEFAULT_BASELINE_RENT = 1200.0
DEFAULT_MIN_DECADE_COUNT = 5

# Plausibles Baujahr-Fenster (obere Grenze = aktuelles Jahr, wird zur Laufzeit bestimmt)
MIN_YEAR_CONSTRUCTED = 1800


def coefficient_set_name() -> str:
    return os.getenv("RENT_COEFFICIENT_SET", DEFAULT_COEFFICIENT_SET).strip().lower()


def baseline_rent() -> float:
    raw = os.getenv("RENT_BASELINE")
    if raw is None or not raw.strip():
        return DEFAULT_BASELINE_RENT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"RENT_BASELINE ist keine Zahl: {raw!r}")
    if value <= 0:
        raise ValueError(f"RENT_BASELINE muss > 0 sein, ist {value}")
    return value


def min_decade_count() -> int:
    raw = os.getenv("MIN_DECADE_COUNT")
    if raw is None or not raw.strip():
        return DEFAULT_MIN_DECADE_COUNT
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"MIN_DECADE_COUNT ist keine ganze Zahl: {raw!r}")
