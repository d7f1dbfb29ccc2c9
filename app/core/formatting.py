
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

@dataclass(frozen=True)
class Count:
    value: int

@dataclass(frozen=True)
class NullableCount:
    value: Optional[int] = None

@dataclass(frozen=True)
class Timestamp:
    value: datetime

Formattable = Union[Count, NullableCount, Timestamp]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def format_value(value: Formattable) -> str:
    """
    Renders a count or timestamp for display.
    A missing nullable count renders as an empty string.
    """
    if isinstance(value, Count):
        return f"{value.value:,}"
    if isinstance(value, NullableCount):
        return "" if value.value is None else f"{value.value:,}"
    if isinstance(value, Timestamp):
        return value.value.strftime(TIMESTAMP_FORMAT)
    raise TypeError(f"cannot format {type(value).__name__}")


_SIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB")


def format_bytes(size: int) -> str:
    """SI byte sizes, e.g. 5 B, 1.2 kB, 34 MB."""
    if size < 10:
        return f"{size} B"
    val = float(size)
    exp = 0
    # compared after rounding, 999_950 is 1.0 MB not 1000 kB
    while val >= 999.5 and exp < len(_SIZE_UNITS) - 1:
        val /= 1000
        exp += 1
    if exp == 0:
        return f"{size} B"
    if val < 9.95:
        return f"{val:.1f} {_SIZE_UNITS[exp]}"
    return f"{val:.0f} {_SIZE_UNITS[exp]}"
