import math
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Iterable, List, Sequence

from .canonical import CanonicalResponse, canonicalize

# always reported, even at zero
SEEDED_TYPES = ("Household", "Shop / Retailer", "Other")

RAW_SAMPLE_SIZE = 50
TOP_PAIN_POINTS = 5


def _round(x: float, places: str) -> Decimal:
    # half-up on the exact binary value, same digits a JS toFixed would give
    if not math.isfinite(x):
        x = 0.0
    d = Decimal(x)
    with localcontext() as ctx:
        # room for every integer digit plus the kept decimals
        ctx.prec = max(ctx.prec, d.adjusted() + len(places))
        return d.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def market_share(rows: Sequence[CanonicalResponse]) -> List[Dict[str, str]]:
    total = len(rows)
    if not total:
        return []
    counts = Counter(r.brand for r in rows)
    share = [(name, _round(c / total * 100, "0.1")) for name, c in counts.items()]
    # sorted() is stable: equal shares keep first-appearance order
    share.sort(key=lambda it: it[1], reverse=True)
    return [{"name": name, "percentage": str(pct)} for name, pct in share]


def top_pain_points(rows: Iterable[CanonicalResponse], limit: int = TOP_PAIN_POINTS) -> List[Dict[str, Any]]:
    counts = Counter()
    for r in rows:
        counts.update(r.pain_points)
    ranked = sorted(counts.items(), key=lambda it: it[1], reverse=True)
    return [{"name": name, "count": c} for name, c in ranked[:limit]]


def locality_spend(rows: Iterable[CanonicalResponse]) -> List[Dict[str, str]]:
    groups: Dict[str, List[float]] = {}
    for r in rows:
        if r.locality is None:
            continue
        groups.setdefault(r.locality, []).append(r.spend)
    return [
        {"area": area, "avgSpend": str(_round(sum(spends) / len(spends), "0.01"))}
        for area, spends in groups.items()
    ]


def type_distribution(rows: Iterable[CanonicalResponse]) -> Dict[str, int]:
    dist = {t: 0 for t in SEEDED_TYPES}
    for r in rows:
        if r.respondent_type is not None:
            dist[r.respondent_type] = dist.get(r.respondent_type, 0) + 1
    return dist


def aggregate(records: Sequence[Any], sample_size: int = RAW_SAMPLE_SIZE,
              top_n: int = TOP_PAIN_POINTS) -> Dict[str, Any]:
    """
    Build the dashboard summary from raw response rows of either storage shape.
    Pure function of `records`; nothing is cached between calls.
    """
    records = list(records)
    rows = [canonicalize(r if isinstance(r, dict) else {}) for r in records]
    return {
        "total": len(rows),
        "marketShare": market_share(rows),
        "topPainPoints": top_pain_points(rows, top_n),
        "localityAnalysis": locality_spend(rows),
        "distribution": type_distribution(rows),
        "raw": records[:sample_size],
    }
