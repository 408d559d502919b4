from __future__ import annotations
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import pandas as pd
from typing import Any


def round_half_up(x: float, places: int = 1) -> float:
    """Half-up rounding: 2.25 -> 2.3 (builtin ``round`` gives 2.2)."""
    try:
        q = Decimal(str(x)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return x
    return float(q)


def format_one_decimal(x: Any) -> str:
    """One decimal ("2.5"); 0 / None / NaN render as "0" like an empty dataset."""
    if x is None:
        return "0"
    try:
        v = float(x)
    except (TypeError, ValueError):
        return str(x)
    if math.isnan(v) or v == 0:
        return "0"
    return f"{round_half_up(v, 1):.1f}"


def format_int(x: Any) -> str:
    if x is None:
        return ""
    try:
        return str(int(x))
    except (TypeError, ValueError):
        try:
            return str(int(float(x)))
        except (TypeError, ValueError):
            return str(x)


def format_year(x: Any) -> str:
    s = format_int(x)
    return f"Year {s}" if s else ""


def format_timestamp(x: Any) -> str:
    """ISO-ish backend timestamp -> "YYYY-MM-DD HH:MM"; unparseable -> ""."""
    if x is None or (isinstance(x, str) and not x.strip()):
        return ""
    ts = pd.to_datetime(x, errors="coerce")
    if pd.isna(ts):
        return ""
    return ts.strftime("%Y-%m-%d %H:%M")
