"""Reconcile the two storage shapes of a survey response.

Rows come either from the local store (`area`, `type`, `problems` as a JSON
array, `monthly_20l`) or from the spreadsheet mirror (`locality`,
`respondent_type`, `pain_points` as a comma-joined string, `monthly_spend`).
A single collection may mix both, so each row is resolved on its own.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..ingest.mapper import is_blank

logger = logging.getLogger(__name__)

# logical field -> source names, highest precedence first
BRAND_FIELDS = ("current_brand", "current_brand_")
LOCALITY_FIELDS = ("locality", "area")
SPEND_FIELDS = ("monthly_spend", "monthly_20l")
TYPE_FIELDS = ("respondent_type", "type")

UNKNOWN_BRAND = "Unknown"
PAIN_POINT_SEPARATOR = ", "

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class CanonicalResponse:
    brand: str
    pain_points: Tuple[str, ...]
    locality: Optional[str]
    spend: float
    respondent_type: Optional[str]


def parse_spend(v: Any) -> float:
    """Leading numeric prefix as a float ("120 Rs" -> 120.0); 0 otherwise."""
    if isinstance(v, bool) or v is None:
        return 0.0
    if isinstance(v, (int, float)):
        x = float(v)
    else:
        m = _LEADING_NUMBER.match(str(v))
        if not m:
            return 0.0
        x = float(m.group(1))
    return x if math.isfinite(x) else 0.0


def _labels(items) -> Tuple[str, ...]:
    return tuple(str(p) for p in items if not is_blank(p))


def parse_pain_points(record: Dict[str, Any]) -> Tuple[str, ...]:
    joined = record.get("pain_points")
    if not is_blank(joined):
        if isinstance(joined, (list, tuple)):
            return _labels(joined)
        return _labels(str(joined).split(PAIN_POINT_SEPARATOR))

    encoded = record.get("problems")
    if is_blank(encoded):
        return ()
    if isinstance(encoded, (list, tuple)):
        return _labels(encoded)
    try:
        decoded = json.loads(encoded)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring undecodable problems value: {encoded!r}")
        return ()
    if isinstance(decoded, list):
        return _labels(decoded)
    return ()


def _first_present(record: Dict[str, Any], fields) -> Optional[Any]:
    """First value that is neither missing nor the empty string, kept verbatim."""
    for k in fields:
        v = record.get(k)
        if v is not None and v != "":
            return v
    return None


def _text(v: Any) -> Optional[str]:
    # no stripping: "X " and "X" are different group keys
    return None if v is None else str(v)


def canonicalize(record: Dict[str, Any]) -> CanonicalResponse:
    return CanonicalResponse(
        brand=_text(_first_present(record, BRAND_FIELDS)) or UNKNOWN_BRAND,
        pain_points=parse_pain_points(record),
        locality=_text(_first_present(record, LOCALITY_FIELDS)),
        spend=parse_spend(_first_present(record, SPEND_FIELDS)),
        respondent_type=_text(_first_present(record, TYPE_FIELDS)),
    )
