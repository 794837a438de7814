from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd
from sqlmodel import Session, select

from ..coercion import clean_field
from ..models import ListingRaw, RAW_COLUMNS

logger = logging.getLogger(__name__)

RawRow = Dict[str, str]


def _frame_to_rows(df: pd.DataFrame) -> List[RawRow]:
    # Header/Werte: trimmen und umschließende Anführungszeichen entfernen
    return [
        {clean_field(k): clean_field(v) for k, v in rec.items()}
        for rec in df.to_dict(orient="records")
    ]


def read_csv_rows(content: bytes, max_rows: Optional[int] = None) -> List[RawRow]:
    """CSV-Bytes -> Liste von Zeilen (alle Werte als String, keine NA-Umwandlung)."""
    df = pd.read_csv(
        io.BytesIO(content),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
    )
    if max_rows:
        df = df.head(max_rows)
    rows = _frame_to_rows(df)
    logger.info("CSV gelesen: %d Zeilen, Spalten: %s", len(rows), list(df.columns))
    return rows


def read_zip_rows(content: bytes, max_rows: Optional[int] = None) -> List[RawRow]:
    z = zipfile.ZipFile(io.BytesIO(content))
    # nimm die erste CSV im Archiv
    csv_names = [n for n in z.namelist() if n.lower().endswith(".csv")]
    if not csv_names:
        logger.warning("Keine CSV im ZIP-Archiv gefunden")
        return []
    with z.open(csv_names[0]) as f:
        return read_csv_rows(f.read(), max_rows=max_rows)


def read_rows(path: str | Path, max_rows: Optional[int] = None) -> List[RawRow]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Datei nicht gefunden: {p}")
    content = p.read_bytes()
    if p.suffix.lower() == ".zip":
        return read_zip_rows(content, max_rows=max_rows)
    return read_csv_rows(content, max_rows=max_rows)


def store_raw_rows(session: Session, rows: Sequence[Mapping[str, str]], source: str = "kaggle") -> int:
    """Rohzeilen unverändert in listings_raw ablegen; nicht gemappte Spalten -> extra_json."""
    to_add = []
    for row in rows:
        values = {dst: (None if row.get(src) is None else str(row.get(src))) for src, dst in RAW_COLUMNS.items()}
        leftovers = {k: v for k, v in row.items() if k not in RAW_COLUMNS}
        to_add.append(ListingRaw(
            **values,
            source=source,
            extra_json=json.dumps(leftovers, ensure_ascii=False) if leftovers else None,
        ))
    session.add_all(to_add)
    session.commit()
    logger.info("%d Rohinserate gespeichert (source=%s)", len(to_add), source)
    return len(to_add)


def load_raw_rows(session: Session, source: Optional[str] = None) -> List[RawRow]:
    """Rohinserate wieder in Zeilenform (Original-Spaltennamen, fehlend -> '')."""
    stmt = select(ListingRaw)
    if source is not None:
        stmt = stmt.where(ListingRaw.source == source)
    rows = []
    for rec in session.exec(stmt.order_by(ListingRaw.id)).all():
        rows.append({src: (getattr(rec, dst) or "") for src, dst in RAW_COLUMNS.items()})
    return rows
