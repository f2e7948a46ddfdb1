"""
Sanitizer capabilities and the resolved transform step.

Custom sanitizers come in two flavours:

    class SsnSanitizer(AttributeSanitizer):
        def sanitize_each(self, record, attribute, value):
            return value.replace("-", "")

    class PersonSanitizer(RecordSanitizer):
        def sanitize(self, record):
            record.full_name = f"{record.first_name} {record.last_name}"

Subclassing is optional: any object exposing ``sanitize_each`` (or
``sanitize`` for whole-record sanitizers) is accepted.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

__all__ = [
    "AttributeSanitizer",
    "RecordSanitizer",
    "FunctionSanitizer",
    "TransformStep",
    "is_attribute_sanitizer",
    "is_record_sanitizer",
    "instantiate",
]


class AttributeSanitizer(ABC):
    """
    Base class for custom per-attribute sanitizers.

    The options given in the declaration (``sanitizes("ssn", ssn=True)``)
    are available as ``self.options``.
    """

    def __init__(self, options: Any = True):
        self.options = options

    @abstractmethod
    def sanitize_each(self, record: Any, attribute: str, value: Any) -> Any:
        """
        Return the sanitized value to be stored in the attribute.

        Args:
            record: the record being sanitized
            attribute: the name of the attribute being sanitized
            value: the current value (output of the previous step)
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} options={self.options!r}>"


class RecordSanitizer(ABC):
    """Base class for whole-record sanitizers, run after every attribute chain."""

    @abstractmethod
    def sanitize(self, record: Any) -> None:
        """Mutate the record in place."""


class FunctionSanitizer(AttributeSanitizer):
    """Adapts a plain ``fn(record, attribute, value)`` callable."""

    def __init__(self, fn: Callable[[Any, str, Any], Any], options: Any = True):
        super().__init__(options)
        self.fn = fn

    def sanitize_each(self, record: Any, attribute: str, value: Any) -> Any:
        return self.fn(record, attribute, value)

    def __repr__(self) -> str:
        return f"<FunctionSanitizer {getattr(self.fn, '__name__', self.fn)!r}>"


def _implements(obj: Any, method: str) -> bool:
    fn = getattr(obj, method, None)
    if fn is None or not callable(fn):
        return False
    return not getattr(fn, "__isabstractmethod__", False)


def is_attribute_sanitizer(obj: Any) -> bool:
    """True if obj (class or instance) exposes a concrete sanitize_each()."""
    return _implements(obj, "sanitize_each")


def is_record_sanitizer(obj: Any) -> bool:
    """True if obj (class or instance) exposes a concrete sanitize()."""
    return _implements(obj, "sanitize")


def instantiate(cls: type, options: Any) -> Any:
    """
    Instantiate an attribute sanitizer class, passing the declared options
    when its constructor takes a positional argument.
    """
    try:
        params = list(inspect.signature(cls).parameters.values())
    except (TypeError, ValueError):
        return cls()
    accepts = any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )
    return cls(options) if accepts else cls()


@dataclass(frozen=True)
class TransformStep:
    """
    One resolved entry of an attribute's transform chain.

    Exactly one of ``builtin`` (a pure ``(value, options)`` function) or
    ``sanitizer`` (an object with ``sanitize_each``) is set.
    """

    name: str
    options: Any
    builtin: Optional[Callable[[Any, Any], Any]] = None
    sanitizer: Any = None

    @property
    def is_builtin(self) -> bool:
        return self.builtin is not None

    def apply(self, record: Any, attribute: str, value: Any) -> Any:
        if self.sanitizer is not None:
            return self.sanitizer.sanitize_each(record, attribute, value)
        return self.builtin(value, self.options)
