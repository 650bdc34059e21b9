# payment_utils.py
# Helpers for reading amounts and lists out of loosely shaped upstream JSON payloads.

import math
from decimal import Decimal
from typing import Any, List, Mapping


def as_amount(value: Any) -> float:
    """
    Numeric value of an upstream amount field.

    Missing, boolean, NaN/inf and non-numeric values (including numeric-looking
    strings) count as 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return value
    return 0


def normalize_list(value: Any) -> List[Any]:
    """
    Coerce an API payload into a list.

    Accepts a bare list, a ``{"data": [...]}`` envelope, or anything else
    (``None``, plain objects, scalars), which becomes an empty list.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, Mapping) and isinstance(value.get("data"), list):
        return value["data"]
    return []


def get_path(payload: Any, *keys: str, default: Any = None) -> Any:
    """Walk nested mappings; any missing or non-mapping hop yields ``default``."""
    current = payload
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return default if current is None else current
