"""Field coercion shared by every collection editor.

Form inputs arrive as strings (or whatever the client serialised), so each
editable field is parsed into its declared type here. Parsing never raises
for bad user input: numbers fall back to the field default.
"""

import enum
import math
import re
from typing import Any, Iterable, List, NamedTuple, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class UnknownFieldError(ValueError):
    """Field name is not editable on this collection."""


class IntRule(NamedTuple):
    default: int
    minimum: Optional[int] = None
    maximum: Optional[int] = None


def parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse: ``"12abc"`` → 12, ``"abc"`` → None."""

    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # digit run longer than the interpreter's int conversion limit
        return None


def coerce_int(value: Any, rule: IntRule) -> int:
    # zero counts as "no value", same as the form inputs
    parsed = parse_int(value) or rule.default
    if rule.minimum is not None and parsed < rule.minimum:
        parsed = rule.minimum
    if rule.maximum is not None and parsed > rule.maximum:
        parsed = rule.maximum
    return parsed


def coerce_optional_int(value: Any, rule: IntRule) -> Optional[int]:
    """Blank or unparseable input clears the field."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_int(value)
    if parsed is None:
        return None
    return coerce_int(parsed, rule)


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def coerce_str_list(value: Any) -> List[str]:
    """Lists pass through; text is split on commas; any other scalar is one item."""

    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        items = [value]
    return [str(item).strip() for item in items if str(item).strip()]


def coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def coerce_enum(value: Any, enum_type: type[enum.Enum]) -> enum.Enum:
    if isinstance(value, enum_type):
        return value
    return enum_type(str(value).strip().lower())


def week_rule(default: int = 1) -> IntRule:
    return IntRule(default=default, minimum=1, maximum=16)


PERCENT = IntRule(default=0, minimum=0, maximum=100)
NON_NEGATIVE = IntRule(default=0, minimum=0)
ORDINAL = IntRule(default=1, minimum=1)
