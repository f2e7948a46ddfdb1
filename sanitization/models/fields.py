"""
Model fields — typed attribute declarations with validation.

    class Person(Model):
        first_name = CharField(max_length=50)
        age = IntegerField(null=True)
        notes = TextField(blank=True, default="")

Fields validate on Model.full_clean(), after sanitization has run, so
what gets checked and stored is the sanitized value. Each field type only
implements coerce(); null handling, choices and extra validators are
shared.
"""

from __future__ import annotations

import copy
import decimal
from typing import Any, Callable, List, Optional, Sequence, Tuple, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Model

__all__ = [
    "FieldValidationError",
    "UNSET",
    "Field",
    "AutoField",
    "IntegerField",
    "FloatField",
    "DecimalField",
    "CharField",
    "TextField",
    "BooleanField",
]


class FieldValidationError(ValueError):
    """A (sanitized) value does not fit its field."""

    def __init__(self, field_name: str, message: str, value: Any = None):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Field '{field_name}': {message}")


class _Unset:
    def __repr__(self) -> str:
        return "<UNSET>"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


class Field:
    """
    Base field.

    Args:
        null: accept None (default False)
        blank: accept empty or whitespace-only text (default False)
        default: value or zero-argument callable used by Model.__init__
        primary_key: this field identifies the row
        choices: ``(value, label)`` pairs the value must come from
        validators: callables run on the coerced value; they raise to reject
    """

    def __init__(
        self,
        *,
        null: bool = False,
        blank: bool = False,
        default: Any = UNSET,
        primary_key: bool = False,
        choices: Optional[Sequence[Tuple[Any, str]]] = None,
        validators: Optional[List[Callable[[Any], Any]]] = None,
    ):
        self.null = null
        self.blank = blank
        self.default = default
        self.primary_key = primary_key
        self.choices = choices
        self.validators = list(validators or [])
        self.name = ""
        self.model: Optional[Type[Model]] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.name}>"

    def has_default(self) -> bool:
        return self.default is not UNSET

    def get_default(self) -> Any:
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default) if self.has_default() else None

    def fail(self, message: str, value: Any = None) -> FieldValidationError:
        return FieldValidationError(self.name, message, value)

    def coerce(self, value: Any) -> Any:
        """Convert a non-None value to the field's type, or raise fail()."""
        return value

    def validate(self, value: Any) -> Any:
        """Return the cleaned value for storage."""
        if value is None:
            if self.null:
                return None
            raise self.fail("Cannot be null")

        value = self.coerce(value)
        if self.choices and value not in [choice for choice, _ in self.choices]:
            raise self.fail(f"Invalid choice {value!r}", value)
        for validator in self.validators:
            validator(value)
        return value

    def to_python(self, value: Any) -> Any:
        """Convert a stored value back into a Python object."""
        return value


# ── Numbers ──────────────────────────────────────────────────────────────────


class IntegerField(Field):

    def coerce(self, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(value)
        except (TypeError, ValueError):
            raise self.fail(f"Expected integer, got {type(value).__name__}", value) from None


class AutoField(IntegerField):
    """Integer primary key assigned by storage on insert."""

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("primary_key", True)
        kwargs.setdefault("null", True)
        super().__init__(**kwargs)


class FloatField(Field):

    def coerce(self, value: Any) -> Any:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise self.fail(f"Expected number, got {type(value).__name__}", value) from None


class DecimalField(Field):
    """Fixed-point number limited to ``max_digits`` with ``decimal_places`` after the point."""

    def __init__(self, *, max_digits: int = 10, decimal_places: int = 2, **kwargs: Any):
        self.max_digits = max_digits
        self.decimal_places = decimal_places
        super().__init__(**kwargs)

    def coerce(self, value: Any) -> Any:
        if not isinstance(value, decimal.Decimal):
            try:
                value = decimal.Decimal(str(value))
            except decimal.InvalidOperation:
                raise self.fail(f"Expected decimal, got {type(value).__name__}", value) from None

        if not value.is_finite():
            raise self.fail("Expected a finite decimal", value)
        _, digits, exponent = value.as_tuple()
        places = max(0, -exponent)
        whole = max(0, len(digits) + exponent)
        if places > self.decimal_places:
            raise self.fail(f"At most {self.decimal_places} decimal places allowed, got {places}", value)
        if whole > self.max_digits - self.decimal_places:
            raise self.fail(
                f"At most {self.max_digits - self.decimal_places} digits allowed before the point",
                value,
            )
        return value

    def to_python(self, value: Any) -> Any:
        return None if value is None else decimal.Decimal(str(value))


# ── Text ─────────────────────────────────────────────────────────────────────


class TextField(Field):
    """Unbounded text."""

    def coerce(self, value: Any) -> Any:
        value = value if isinstance(value, str) else str(value)
        if not self.blank and not value.strip():
            raise self.fail("Cannot be blank", value)
        return value


class CharField(TextField):
    """Text of at most ``max_length`` characters."""

    def __init__(self, *, max_length: int = 255, **kwargs: Any):
        self.max_length = max_length
        super().__init__(**kwargs)

    def coerce(self, value: Any) -> Any:
        value = super().coerce(value)
        if len(value) > self.max_length:
            raise self.fail(f"Max length is {self.max_length}, got {len(value)} characters", value)
        return value


# ── Flags ────────────────────────────────────────────────────────────────────

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


class BooleanField(Field):

    def coerce(self, value: Any) -> Any:
        if isinstance(value, (bool, int)):
            return bool(value)
        if isinstance(value, str) and value.lower() in _TRUE | _FALSE:
            return value.lower() in _TRUE
        raise self.fail(f"Expected boolean, got {type(value).__name__}", value)
