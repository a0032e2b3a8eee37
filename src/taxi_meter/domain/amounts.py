# taxi_meter/domain/amounts.py
import math
import re
from typing import Any

# leading decimal number, the way a form field's parseFloat reads "12.5元"
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(raw: Any) -> float:
    """
    Read a fee / rate entry typed into a form.

    Numbers pass through; strings contribute their leading number.
    Anything unparsable, negative or non-finite reads as 0.0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        m = _LEADING_NUMBER.match(raw)
        if m is None:
            return 0.0
        value = float(m.group())
    else:
        return 0.0
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return value


def money(x: float) -> str:
    return f"{x:.2f}"
