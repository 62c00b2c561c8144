# watersurvey/ingest/pipeline.py
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..mirror import MirrorError, SheetMirror
from ..models import STORE_COLUMNS, SurveyResponse
from .mapper import DEFAULT_TYPE, LIST_FIELDS, MIRROR_COLUMNS, normalize_submission

logger = logging.getLogger(__name__)

ALLOWED = {".xlsx", ".xls", ".csv"}


@dataclass
class IngestOutcome:
    stored: bool
    forwarded: bool


def ingest_submission(payload: Dict[str, Any], mirror: SheetMirror, store_available: bool = True) -> IngestOutcome:
    """
    Fan one submission out to the Record Store and the mirror.
    The two sinks are independent: a failure in either is logged and
    swallowed, and never prevents the other attempt.
    Only a payload that cannot be normalised raises.
    """
    columns = normalize_submission(payload)

    stored = False
    if store_available:
        try:
            SurveyResponse.insert(columns)
            stored = True
            logger.info("Saved survey response to local store")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning(f"Local store save failed: {e}")
    else:
        logger.warning("Local store unavailable, skipping save")

    forwarded = False
    if mirror.configured:
        try:
            # forward what the form sent, not the normalised columns
            mirror.forward(payload)
            forwarded = True
            logger.info("Synced survey response with mirror")
        except MirrorError as e:
            logger.error(f"Mirror sync failed: {e}")
    else:
        logger.warning("Mirror URL not configured, skipping sync")

    return IngestOutcome(stored=stored, forwarded=forwarded)


def _read_any(path: Path) -> pd.DataFrame:
    suf = path.suffix.lower()
    if suf not in ALLOWED:
        raise ValueError(f"Unsupported file type: {suf}")
    if suf == ".csv":
        try:
            return pd.read_csv(path, dtype=str, encoding="utf-8-sig")
        except UnicodeDecodeError:
            return pd.read_csv(path, dtype=str)
    return pd.read_excel(path, dtype=str, engine="openpyxl" if suf == ".xlsx" else None)


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    df.columns = [MIRROR_COLUMNS.get(c, c) for c in df.columns]
    # a sheet can carry both spellings; keep the first
    return df.loc[:, ~df.columns.duplicated()]


def _cell(v: Any) -> str:
    if v is None or pd.isna(v):
        return ""
    return str(v).strip()


def _as_json_list(s: str) -> str:
    """Sheet cells hold either a JSON array or a comma-joined string."""
    if not s:
        return "[]"
    if s.startswith("["):
        try:
            items = json.loads(s)
        except ValueError:
            items = None
        if isinstance(items, list):
            return json.dumps([str(x) for x in items], ensure_ascii=False)
    return json.dumps([p.strip() for p in s.split(",") if p.strip()], ensure_ascii=False)


def import_sheet(path: Path) -> int:
    """
    Read a CSV/Excel export of the spreadsheet -> map columns to the store
    shape -> insert every row. Returns the number of rows written.
    created_at is always assigned at insert time; exported timestamps are ignored.
    """
    df = _read_any(path)
    df = df.dropna(how="all")
    if df.empty:
        return 0
    df = _standardize_columns(df)

    known = [c for c in STORE_COLUMNS if c in df.columns]
    if not known:
        raise ValueError("no survey columns found in sheet")

    rows: List[SurveyResponse] = []
    for _, row in df.iterrows():
        columns = {c: _cell(row.get(c)) for c in known}
        for c in LIST_FIELDS:
            if c in columns:
                columns[c] = _as_json_list(columns[c])
        columns["type"] = columns.get("type") or DEFAULT_TYPE
        rows.append(SurveyResponse(**columns))

    try:
        db.session.add_all(rows)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info(f"Imported {len(rows)} rows from {path.name}")
    return len(rows)
