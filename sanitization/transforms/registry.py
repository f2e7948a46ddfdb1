"""
Transform registry.

Maps transform names to built-in handlers or to explicitly registered
custom sanitizers, and resolves declarations into TransformSteps.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import get_settings
from ..faults import InvalidRecordSanitizerFault, UnknownTransformFault
from .base import (
    FunctionSanitizer,
    TransformStep,
    instantiate,
    is_attribute_sanitizer,
    is_record_sanitizer,
)
from .builtins import ALIASES, BUILTINS, CASES, to_case

logger = logging.getLogger("sanitization.registry")

__all__ = [
    "TransformRegistry",
    "default_registry",
    "register_transform",
    "register_record_transform",
    "register_case",
    "normalize_name",
    "convention_name",
]


def normalize_name(name: Any) -> str:
    """``pattern-replace`` and ``pattern_replace`` name the same transform."""
    return str(name).strip().replace("-", "_")


def convention_name(class_name: str, suffixes: Iterable[str] = ("Sanitizer", "Transform")) -> str:
    """
    Derive a registry key from a class name.

        SsnSanitizer         -> ssn
        PhoneNumberTransform -> phone_number
    """
    for suffix in suffixes:
        if class_name.endswith(suffix) and class_name != suffix:
            class_name = class_name[: -len(suffix)]
            break
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", class_name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


class TransformRegistry:
    """Registry of built-in and custom sanitizers."""

    def __init__(self):
        self.transforms: Dict[str, Any] = {}
        self.record_transforms: Dict[str, Any] = {}
        self.cases: Dict[str, Callable[[Any], Any]] = dict(CASES)

    @classmethod
    def default(cls) -> "TransformRegistry":
        """Return the process-wide registry."""
        return default_registry()

    # ── Registration ─────────────────────────────────────────────────

    def _key(self, sanitizer: Any, name: Optional[str]) -> str:
        if name:
            return normalize_name(name)
        if isinstance(sanitizer, type):
            return convention_name(sanitizer.__name__, get_settings().convention_suffixes)
        fn_name = getattr(sanitizer, "__name__", None)
        if fn_name:
            return normalize_name(fn_name)
        return convention_name(type(sanitizer).__name__, get_settings().convention_suffixes)

    def register(self, sanitizer: Any, name: Optional[str] = None) -> Any:
        """
        Register a custom attribute sanitizer.

        Accepts a class, an instance, or a plain ``fn(record, attribute,
        value)`` function. Without ``name`` the key is derived from the
        class name (``SsnSanitizer`` -> ``ssn``) or the function name.
        """
        key = self._key(sanitizer, name)
        if key in BUILTINS or key in ALIASES:
            raise ValueError(f"'{key}' is a built-in sanitizer and cannot be replaced")
        if key in self.transforms:
            logger.warning(f"Replacing registered sanitizer '{key}'")
        self.transforms[key] = sanitizer
        logger.debug(f"Registered sanitizer '{key}' -> {sanitizer!r}")
        return sanitizer

    def register_record(self, sanitizer: Any, name: Optional[str] = None) -> Any:
        """Register a whole-record sanitizer so it can be referenced by name."""
        key = self._key(sanitizer, name)
        self.record_transforms[key] = sanitizer
        logger.debug(f"Registered record sanitizer '{key}' -> {sanitizer!r}")
        return sanitizer

    def register_case(self, name: str, converter: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Register a custom case conversion for the ``case`` transform."""
        if not callable(converter):
            raise TypeError(f"Case converter for '{name}' must be callable")
        self.cases[name] = converter
        return converter

    def unregister(self, name: str) -> bool:
        key = normalize_name(name)
        removed = self.transforms.pop(key, None) is not None
        removed = self.record_transforms.pop(key, None) is not None or removed
        return removed

    def clear(self) -> None:
        """Drop custom registrations (useful for testing)."""
        self.transforms.clear()
        self.record_transforms.clear()
        self.cases = dict(CASES)

    # ── Lookup ───────────────────────────────────────────────────────

    def is_builtin(self, name: Any) -> bool:
        key = normalize_name(name)
        return key in BUILTINS or key in ALIASES

    def names(self) -> List[str]:
        """All names a declaration may use."""
        return sorted({*BUILTINS, *ALIASES, *self.transforms})

    def resolve(self, name: Any, options: Any) -> TransformStep:
        """
        Resolve a declared ``name: options`` pair into a TransformStep.

        Raises:
            UnknownTransformFault: name is neither built in nor registered,
                or the registered object lacks sanitize_each()
            InvalidTransformOptionsFault: options do not fit a built-in
        """
        key = normalize_name(name)
        canonical = ALIASES.get(key, key)

        transform = BUILTINS.get(canonical)
        if transform is not None:
            apply = transform.apply
            if canonical == "case":
                apply = functools.partial(to_case, cases=self.cases)
            return TransformStep(name=str(name), options=transform.prepare(options), builtin=apply)

        if key not in self.transforms:
            raise UnknownTransformFault(str(name))

        sanitizer = self.transforms[key]
        if isinstance(sanitizer, type):
            if not is_attribute_sanitizer(sanitizer):
                raise UnknownTransformFault(str(name), reason=f"{sanitizer.__name__} does not implement sanitize_each")
            sanitizer = instantiate(sanitizer, options)
        elif not is_attribute_sanitizer(sanitizer):
            if not callable(sanitizer):
                raise UnknownTransformFault(str(name), reason="registered object does not implement sanitize_each")
            sanitizer = FunctionSanitizer(sanitizer, options)

        return TransformStep(name=str(name), options=options, sanitizer=sanitizer)

    def resolve_record(self, sanitizer: Any) -> Any:
        """
        Resolve a whole-record sanitizer given as a class, instance or name.

        Raises:
            UnknownTransformFault: a name that is not registered
            InvalidRecordSanitizerFault: no concrete sanitize(record)
        """
        if isinstance(sanitizer, str):
            key = normalize_name(sanitizer)
            if key not in self.record_transforms:
                raise UnknownTransformFault(sanitizer)
            sanitizer = self.record_transforms[key]

        if not is_record_sanitizer(sanitizer):
            raise InvalidRecordSanitizerFault(sanitizer)
        if isinstance(sanitizer, type):
            return sanitizer()
        return sanitizer


# ── Process-wide registry ────────────────────────────────────────────────────

_default: Optional[TransformRegistry] = None


def default_registry() -> TransformRegistry:
    global _default
    if _default is None:
        _default = TransformRegistry()
    return _default


def register_transform(name: Optional[str] = None, *, registry: Optional[TransformRegistry] = None):
    """
    Decorator to register a custom attribute sanitizer.

        @register_transform("ssn")
        def strip_dashes(record, attribute, value):
            return value.replace("-", "")
    """
    def decorator(obj):
        (registry or default_registry()).register(obj, name)
        return obj
    return decorator


def register_record_transform(name: Optional[str] = None, *, registry: Optional[TransformRegistry] = None):
    """Decorator to register a whole-record sanitizer by name."""
    def decorator(obj):
        (registry or default_registry()).register_record(obj, name)
        return obj
    return decorator


def register_case(name: str, *, registry: Optional[TransformRegistry] = None):
    """Decorator to register a custom case conversion."""
    def decorator(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
        (registry or default_registry()).register_case(name, fn)
        return fn
    return decorator
