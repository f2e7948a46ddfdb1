"""
Built-in transforms — the closed set of value sanitizers.

Each transform is a pure function ``(value, options) -> value``. ``None``
passes through every transform unchanged. Options are checked and
normalised once, at declaration time, by the transform's ``prepare``
function; the normalised form is what ``apply`` receives.

    case      upcase | downcase | camelcase | pascalcase | titlecase | custom
    gsub      {"pattern": r"[^0-9]", "replacement": ""}   (alias pattern_replace)
    nullify   True
    remove    "-" | re.compile(...) | ["-", " "]           (alias remove_substring)
    round     2
    squish    True
    strip     True
    truncate  4
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Tuple

from ..faults import (
    InvalidTransformOptionsFault,
    UnsupportedCaseFault,
    UnsupportedValueFault,
)

__all__ = [
    "BuiltinTransform",
    "BUILTINS",
    "ALIASES",
    "CASES",
    "is_blank",
    "camelcase",
    "pascalcase",
    "titlecase",
    "to_case",
]


@dataclass(frozen=True)
class BuiltinTransform:
    name: str
    apply: Callable[[Any, Any], Any]
    prepare: Callable[[Any], Any]


BUILTINS: Dict[str, BuiltinTransform] = {}

ALIASES: Dict[str, str] = {
    "pattern_replace": "gsub",
    "remove_substring": "remove",
}


def builtin(name: str, prepare: Optional[Callable[[Any], Any]] = None):
    """Register a function as a built-in transform."""
    def decorator(fn: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
        BUILTINS[name] = BuiltinTransform(name=name, apply=fn, prepare=prepare or _as_is)
        return fn
    return decorator


def _as_is(options: Any) -> Any:
    return options


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise UnsupportedValueFault(name, value, "expected a string")
    return value


def is_blank(value: Any) -> bool:
    """None, False, empty/whitespace-only strings and empty containers are blank."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


# ── case ─────────────────────────────────────────────────────────────────────

_UNDERSCORED_WORD = re.compile(r"_([a-z\d]*)", re.IGNORECASE)


def _camelize_rest(value: str) -> str:
    return _UNDERSCORED_WORD.sub(lambda m: m.group(1).capitalize(), value)


def pascalcase(value: str) -> str:
    """john_patrick -> JohnPatrick"""
    value = re.sub(r"^[a-z\d]*", lambda m: m.group(0).capitalize(), value)
    return _camelize_rest(value)


def camelcase(value: str) -> str:
    """JohnPatrick / john_patrick -> johnPatrick"""
    value = re.sub(r"^\w", lambda m: m.group(0).lower(), value)
    return _camelize_rest(value)


def _underscore(value: str) -> str:
    value = re.sub(r"([A-Z\d]+)([A-Z][a-z])", r"\1_\2", value)
    value = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", value)
    return value.replace("-", "_").lower()


def _humanize(value: str) -> str:
    value = re.sub(r"^_+", "", value)
    value = re.sub(r"_id$", "", value)
    return value.replace("_", " ")


def titlecase(value: str) -> str:
    """john_patrick / JohnPatrick -> John Patrick"""
    words = _humanize(_underscore(value))
    return re.sub(r"\b(?<![\w'’`()])[a-z]", lambda m: m.group(0).upper(), words)


CASES: Dict[str, Callable[[str], str]] = {
    "upcase": str.upper,
    "downcase": str.lower,
    "camelcase": camelcase,
    "pascalcase": pascalcase,
    "titlecase": titlecase,
}


def _prepare_case(options: Any) -> str:
    if not isinstance(options, str) or not options:
        raise InvalidTransformOptionsFault("case", options, "expected a case name such as 'downcase'")
    return options


def to_case(value: Any, case: str, cases: Mapping[str, Callable[[Any], Any]] = CASES) -> Any:
    """
    Apply a named case conversion.

    Known conversions come from ``cases``; any other identifier is looked
    up as a zero-argument method of the value (``swapcase``, ``casefold``)
    and must return text.
    """
    if value is None:
        return None

    converter = cases.get(case)
    if converter is not None:
        if converter is CASES.get(case) and not isinstance(value, str):
            raise UnsupportedCaseFault(case, value)
        return converter(value)

    method = None if case.startswith("_") else getattr(value, case, None)
    if method is None or not callable(method):
        raise UnsupportedCaseFault(case, value)
    try:
        converted = method()
    except TypeError as exc:
        raise UnsupportedCaseFault(case, value) from exc
    if not isinstance(converted, (str, type(value))):
        raise UnsupportedCaseFault(case, value)
    return converted


builtin("case", prepare=_prepare_case)(to_case)


# ── gsub ─────────────────────────────────────────────────────────────────────

def _compile(name: str, pattern: Any) -> Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        try:
            return re.compile(pattern)
        except re.error as exc:
            raise InvalidTransformOptionsFault(name, pattern, f"bad pattern: {exc}") from exc
    raise InvalidTransformOptionsFault(name, pattern, "pattern must be a string or compiled regex")


def _prepare_gsub(options: Any) -> Tuple[Pattern, Any]:
    if isinstance(options, Mapping):
        if "pattern" not in options or "replacement" not in options:
            raise InvalidTransformOptionsFault("gsub", options, "expected 'pattern' and 'replacement'")
        pattern, replacement = options["pattern"], options["replacement"]
    elif isinstance(options, (tuple, list)) and len(options) == 2:
        pattern, replacement = options
    else:
        raise InvalidTransformOptionsFault(
            "gsub", options, "expected {'pattern': ..., 'replacement': ...} or (pattern, replacement)"
        )
    if not isinstance(replacement, str) and not callable(replacement):
        raise InvalidTransformOptionsFault("gsub", options, "replacement must be a string or callable")
    return _compile("gsub", pattern), replacement


@builtin("gsub", prepare=_prepare_gsub)
def gsub(value: Any, options: Tuple[Pattern, Any]) -> Any:
    if value is None:
        return None
    pattern, replacement = options
    return pattern.sub(replacement, _require_str("gsub", value))


# ── nullify ──────────────────────────────────────────────────────────────────

@builtin("nullify")
def nullify(value: Any, options: Any) -> Any:
    if options is not True or value is False:
        return value
    return None if is_blank(value) else value


# ── remove ───────────────────────────────────────────────────────────────────

def _prepare_remove(options: Any) -> List[Pattern]:
    items = options if isinstance(options, (list, tuple)) else [options]
    if not items:
        raise InvalidTransformOptionsFault("remove", options, "nothing to remove")
    patterns = []
    for item in items:
        if isinstance(item, str) and item:
            patterns.append(re.compile(re.escape(item)))
        elif isinstance(item, re.Pattern):
            patterns.append(item)
        else:
            raise InvalidTransformOptionsFault("remove", options, "expected a non-empty string or compiled regex")
    return patterns


@builtin("remove", prepare=_prepare_remove)
def remove(value: Any, options: List[Pattern]) -> Any:
    if value is None:
        return None
    value = _require_str("remove", value)
    for pattern in options:
        value = pattern.sub("", value)
    return value


# ── round ────────────────────────────────────────────────────────────────────

def _prepare_round(options: Any) -> int:
    if isinstance(options, bool) or not isinstance(options, int):
        raise InvalidTransformOptionsFault("round", options, "precision must be an integer")
    return options


def _round_half_up(value: Decimal, precision: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + abs(precision) + 2)
        return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


@builtin("round", prepare=_prepare_round)
def round_(value: Any, precision: int) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        raise UnsupportedValueFault("round", value, "expected a number")
    if isinstance(value, int):
        if precision >= 0:
            return value
        return int(_round_half_up(Decimal(value), precision))
    if isinstance(value, float):
        if not math.isfinite(value):
            return value
        return float(_round_half_up(Decimal(repr(value)), precision))
    if isinstance(value, Decimal):
        if not value.is_finite():
            return value
        return _round_half_up(value, precision)
    raise UnsupportedValueFault("round", value, "expected a number")


# ── squish / strip ───────────────────────────────────────────────────────────

@builtin("squish")
def squish(value: Any, options: Any) -> Any:
    if options is not True or value is None:
        return value
    return " ".join(_require_str("squish", value).split())


@builtin("strip")
def strip(value: Any, options: Any) -> Any:
    if options is not True or value is None:
        return value
    return _require_str("strip", value).strip()


# ── truncate ─────────────────────────────────────────────────────────────────

def _prepare_truncate(options: Any) -> int:
    if isinstance(options, bool) or not isinstance(options, int) or options < 0:
        raise InvalidTransformOptionsFault("truncate", options, "length must be a non-negative integer")
    return options


@builtin("truncate", prepare=_prepare_truncate)
def truncate(value: Any, length: int) -> Any:
    if value is None:
        return None
    return str(value)[:length]
