import json
from typing import Any, Dict, Iterable, List, Optional

# store column <- payload key candidates (camelCase from the survey form)
SCALAR_FIELDS = {
    "name": ["name"],
    "mobile": ["mobile"],
    "area": ["area"],
    "other_type": ["otherType"],
    "other_water_type": ["otherWaterType"],
    "current_brand": ["currentBrand"],
    "price_20l": ["price20l"],
    "price_1l": ["price1l"],
    "price_500ml": ["price500ml"],
    "monthly_20l": ["monthly20l"],
    "daily_bottles": ["dailyBottles"],
    "cheaper_switch": ["cheaperSwitch"],
    "retailer_fastest_size": ["retailerFastestSize"],
    "retailer_margin": ["retailerMargin"],
    "retailer_credit": ["retailerCredit"],
    "retailer_willing_to_stock": ["retailerWillingToStock", "retailerTryHeroAgroFoods"],
    "comments": ["comments"],
}

LIST_FIELDS = {
    "water_types": ["waterTypes"],
    "problems": ["problems"],
    "switching_reasons": ["switchingReasons"],
}

DEFAULT_TYPE = "Household"

# spreadsheet column -> store column, used when importing a sheet export
MIRROR_COLUMNS = {
    "locality": "area",
    "respondent_type": "type",
    "respondent_name": "name",
    "mobile_number": "mobile",
    "current_brand_": "current_brand",
    "pain_points": "problems",
    "monthly_spend": "monthly_20l",
    "water_type": "water_types",
    "switching_reason": "switching_reasons",
    "retailer_try_hero_agro_foods": "retailer_willing_to_stock",
}


def is_blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def pick(data: Dict[str, Any], candidates: Iterable[str]) -> Optional[Any]:
    """First non-blank value among candidate keys."""
    for k in candidates:
        v = data.get(k)
        if not is_blank(v):
            return v
    return None


def as_text(v: Any) -> str:
    if is_blank(v):
        return ""
    if isinstance(v, bool):
        return "Yes" if v else "No"
    return str(v).strip()


def as_string_list(v: Any) -> List[str]:
    if is_blank(v):
        return []
    if isinstance(v, (list, tuple, set)):
        return [str(x).strip() for x in v if not is_blank(x)]
    return [str(v).strip()]


def normalize_submission(payload: Dict[str, Any]) -> Dict[str, str]:
    """
    Survey form payload -> Record Store columns.
    - blank scalars become "", a blank type becomes Household
    - multi-select answers are stored as a JSON array, order kept
    """
    if not isinstance(payload, dict):
        raise TypeError(f"survey payload must be an object, got {type(payload).__name__}")

    columns = {col: as_text(pick(payload, keys)) for col, keys in SCALAR_FIELDS.items()}
    columns["type"] = as_text(payload.get("type")) or DEFAULT_TYPE
    for col, keys in LIST_FIELDS.items():
        columns[col] = json.dumps(as_string_list(pick(payload, keys)), ensure_ascii=False)
    return columns
