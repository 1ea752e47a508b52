"""
Form field coercion.

Multipart form fields always arrive as strings. Each value is turned into its
best-guess type:

1. a strict JSON literal (object, array, number, boolean, null, quoted string);
2. otherwise a well-formed finite number;
3. otherwise the original string.

So "123" -> 123, "true" -> True, '{"a": 1}' -> {"a": 1}, "John Doe" -> "John Doe"
and "abc" stays "abc". Keys are never dropped.
"""

# Standard library imports
import json
import math
import re
from typing import Any, Dict, Mapping, Union

Number = Union[int, float]

_DECIMAL_PATTERN = re.compile(
    r"^[+-]?(?:(?P<int>\d+)(?P<frac>\.\d*)?|\.\d+)(?P<exp>[eE][+-]?\d+)?$"
)
_RADIX_PATTERN = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


class _NotCoercible(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NotCoercible(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise _NotCoercible(f"non-finite number {literal}")
    return value


def _parse_json_literal(value: str) -> Any:
    return json.loads(
        value,
        parse_constant=_reject_constant,
        parse_float=_finite_float,
    )


def _parse_number(value: str) -> Number:
    text = value.strip()
    if not text:
        raise _NotCoercible("empty string is not a number")

    if _RADIX_PATTERN.match(text):
        return int(text, 0)

    match = _DECIMAL_PATTERN.match(text)
    if match is None:
        raise _NotCoercible(f"{value!r} is not a number")

    if match.group("int") is not None and not match.group("frac") and not match.group("exp"):
        return int(text)
    return _finite_float(text)


def coerce_value(value: Any) -> Any:
    """Coerce a single form value; non-string values are returned unchanged."""
    if not isinstance(value, str):
        return value

    try:
        return _parse_json_literal(value)
    except ValueError:
        pass

    try:
        return _parse_number(value)
    except (ValueError, OverflowError):
        return value


def coerce_form_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce every field of a form; the result has exactly the input's keys."""
    return {key: coerce_value(value) for key, value in fields.items()}
