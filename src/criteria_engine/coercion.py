"""
Value coercion for comparisons.

Pure-Python helpers that turn two heterogeneous tuple/criterion values
into a pair the native comparison operators can order. Each
normalization step is its own function; ``normalize_comparison`` chains
them in a fixed order.
"""

from __future__ import annotations

import datetime
import math
import re
from decimal import Decimal
from typing import Any

# ---------------------------------------------------------------------------
# ISO-8601 dates
# ---------------------------------------------------------------------------

X_ISO_DATE = re.compile(
    r"^[+-]?\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])"
    r"([T ]([01]\d|2[0-3]):[0-5]\d(:[0-5]\d([.,]\d+)?)?"
    r"(Z|[+-]([01]\d|2[0-3]):?[0-5]\d)?)?$",
    re.IGNORECASE,
)

_UTC = datetime.timezone.utc
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=_UTC)
_ONE_MS = datetime.timedelta(milliseconds=1)


def is_date(value: Any) -> bool:
    """True for ``date`` and ``datetime`` instances."""
    return isinstance(value, datetime.date)


def _as_utc(value: datetime.date) -> datetime.datetime:
    # Naive datetimes are read as UTC, a bare date as UTC midnight.
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=_UTC)
        return value.astimezone(_UTC)
    return datetime.datetime(value.year, value.month, value.day, tzinfo=_UTC)


def to_epoch_millis(value: datetime.date) -> int:
    """Milliseconds since the Unix epoch."""
    return (_as_utc(value) - _EPOCH) // _ONE_MS


def to_iso_string(value: datetime.date) -> str:
    """Render a date as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC."""
    dt = _as_utc(value)
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        f".{dt.microsecond // 1000:03d}Z"
    )


_FRACTION = re.compile(r"\.(\d+)")
_OFFSET = re.compile(r"([+-])(\d{2}):?(\d{2})$")


def _fraction_to_micros(match: re.Match[str]) -> str:
    return "." + (match.group(1) + "000000")[:6]


def _fromisoformat_text(candidate: str) -> str:
    # fromisoformat before 3.11 only takes 3- or 6-digit fractions and
    # +HH:MM offsets.
    date_part, time_part = candidate[:10], candidate[10:]
    if not time_part:
        return candidate
    time_part = _FRACTION.sub(_fraction_to_micros, time_part)
    time_part = _OFFSET.sub(r"\1\2:\3", time_part)
    return date_part + time_part


def parse_iso_date(text: str) -> datetime.datetime | None:
    """Parse an ISO-8601 string, returning ``None`` when it is not one."""
    if not isinstance(text, str) or not X_ISO_DATE.match(text.strip()):
        return None
    candidate = text.strip().upper().replace(",", ".")
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    candidate = _fromisoformat_text(candidate)
    try:
        return datetime.datetime.fromisoformat(candidate)
    except ValueError:
        return None


def coerce_to_iso(value: Any) -> str | None:
    """
    Coerce a date-typed attribute value to its ISO-8601 string.

    Accepts dates, ISO strings and epoch milliseconds. Returns ``None``
    when the value cannot be read as a date.
    """
    if is_date(value):
        return to_iso_string(value)
    if is_number(value):
        try:
            return to_iso_string(_EPOCH + datetime.timedelta(milliseconds=value))
        except (OverflowError, TypeError, ValueError):
            return None
    if isinstance(value, str):
        parsed = parse_iso_date(value)
        return to_iso_string(parsed) if parsed is not None else None
    return None


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def is_number(value: Any) -> bool:
    """True for ints, floats and decimals (booleans excluded)."""
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def _is_finite(value: int | float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def to_number(value: Any) -> int | float | Decimal | None:
    """
    Read *value* as a finite number.

    Numbers pass through, numeric strings are parsed (surrounding
    whitespace allowed). Booleans, dates, blanks and anything that does
    not parse as a finite number give ``None``.
    """
    if isinstance(value, bool) or is_date(value):
        return None
    if is_number(value):
        return value if _is_finite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def is_numbery(value: Any) -> bool:
    """True when *value* can be read as a finite number."""
    return to_number(value) is not None


def format_number(value: int | float | Decimal) -> str:
    """Decimal text for a number, without a trailing ``.0`` on integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def stringify(value: Any) -> str:
    """Natural string form used by comparisons and pattern matching."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if is_date(value):
        return to_iso_string(value)
    if value is None:
        return ""
    if isinstance(value, list | tuple):
        return ",".join(stringify(item) for item in value)
    return str(value)


# ---------------------------------------------------------------------------
# Normalization pipeline
# ---------------------------------------------------------------------------


def blank_missing(a: Any, b: Any) -> tuple[Any, Any]:
    """Replace ``None`` with the empty string."""
    return ("" if a is None else a, "" if b is None else b)


def lower_strings(a: Any, b: Any) -> tuple[Any, Any]:
    """Lower-case both operands when both are strings."""
    if isinstance(a, str) and isinstance(b, str):
        return a.lower(), b.lower()
    return a, b


def dates_to_epoch(a: Any, b: Any) -> tuple[int, int] | None:
    """Epoch milliseconds for a pair of dates, ``None`` otherwise."""
    if is_date(a) and is_date(b):
        return to_epoch_millis(a), to_epoch_millis(b)
    return None


def dates_to_iso(a: Any, b: Any) -> tuple[Any, Any]:
    """Render a lone date operand as an ISO string."""
    return (
        to_iso_string(a) if is_date(a) else a,
        to_iso_string(b) if is_date(b) else b,
    )


def stringify_non_numbers(a: Any, b: Any) -> tuple[Any, Any]:
    """Stringify every operand that is not a number."""
    return (
        a if is_number(a) else stringify(a),
        b if is_number(b) else stringify(b),
    )


def iso_strings_to_epoch(a: Any, b: Any) -> tuple[Any, Any]:
    """Compare two ISO-date strings as dates."""
    if isinstance(a, str) and isinstance(b, str):
        left, right = parse_iso_date(a), parse_iso_date(b)
        if left is not None and right is not None:
            return to_epoch_millis(left), to_epoch_millis(right)
    return a, b


def _loose_number(text: str) -> int | float:
    if not text.strip():
        return 0
    number = to_number(text)
    if number is None:
        return math.nan
    return float(number) if isinstance(number, Decimal) else number


def align_mixed(a: Any, b: Any) -> tuple[Any, Any]:
    """
    Make a number/string pair orderable.

    The string side is read as a number: blank is 0, anything that does
    not parse is NaN, which compares unequal and unordered to everything.
    """
    if is_number(a) and isinstance(b, str):
        return (float(a) if isinstance(a, Decimal) else a), _loose_number(b)
    if isinstance(a, str) and is_number(b):
        return _loose_number(a), (float(b) if isinstance(b, Decimal) else b)
    return a, b


def normalize_comparison(a: Any, b: Any) -> tuple[Any, Any]:
    """
    Prepare two values for comparison.

    Order of steps:

    1. ``None`` becomes ``""``.
    2. Two strings are lower-cased.
    3. Two dates compare by epoch milliseconds.
    4. A lone date becomes its ISO string.
    5. Non-numbers are stringified.
    6. Two ISO-date strings compare by epoch milliseconds.
    7. A remaining number/string pair is compared numerically.
    """
    a, b = blank_missing(a, b)
    a, b = lower_strings(a, b)

    epochs = dates_to_epoch(a, b)
    if epochs is not None:
        return epochs

    a, b = dates_to_iso(a, b)
    a, b = stringify_non_numbers(a, b)
    a, b = iso_strings_to_epoch(a, b)
    return align_mixed(a, b)
