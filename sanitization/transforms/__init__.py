"""
Transforms — built-in value sanitizers, custom sanitizer capabilities and
the registry that resolves declared names.
"""

from .base import (
    AttributeSanitizer,
    RecordSanitizer,
    FunctionSanitizer,
    TransformStep,
    is_attribute_sanitizer,
    is_record_sanitizer,
)
from .builtins import BUILTINS, ALIASES, CASES, is_blank
from .registry import (
    TransformRegistry,
    default_registry,
    register_transform,
    register_record_transform,
    register_case,
    convention_name,
    normalize_name,
)

__all__ = [
    "AttributeSanitizer",
    "RecordSanitizer",
    "FunctionSanitizer",
    "TransformStep",
    "is_attribute_sanitizer",
    "is_record_sanitizer",
    "BUILTINS",
    "ALIASES",
    "CASES",
    "is_blank",
    "TransformRegistry",
    "default_registry",
    "register_transform",
    "register_record_transform",
    "register_case",
    "convention_name",
    "normalize_name",
]
