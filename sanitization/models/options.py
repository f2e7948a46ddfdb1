"""
Model Options — parsed from the inner Meta class.

Besides the table options, Meta may carry sanitization declarations:

    class Person(Model):
        first_name = CharField(max_length=50)

        class Meta:
            table = "people"
            sanitizes = {"first_name": {"strip": True, "case": "titlecase"}}
            sanitizes_with = PersonSanitizer
            before_sanitization = ["set_defaults"]
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

__all__ = ["Options"]


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class Options:
    """
    Parsed model options from inner Meta class.

    Attributes:
        table_name: Storage table name
        abstract: Whether model is abstract (no table)
        verbose_name: Human-readable model name
        sanitizes: attribute name -> {transform name: options}
        sanitizes_with: whole-record sanitizer (class, instance or name)
        before_sanitization: receivers or method names run before transforms
        after_sanitization: receivers or method names run after transforms
        sanitization_applied: set once the declarations above were applied
    """

    __slots__ = (
        "table_name",
        "abstract",
        "verbose_name",
        "sanitizes",
        "sanitizes_with",
        "before_sanitization",
        "after_sanitization",
        "sanitization_applied",
    )

    def __init__(
        self,
        model_name: str,
        meta: Optional[type] = None,
        table_attr: Optional[str] = None,
    ):
        self.table_name = table_attr or (
            getattr(meta, "table", None) or getattr(meta, "table_name", None)
            if meta else None
        ) or model_name.lower()
        self.abstract: bool = getattr(meta, "abstract", False) if meta else False
        self.verbose_name: str = getattr(meta, "verbose_name", model_name) if meta else model_name

        sanitizes: Mapping[str, Mapping[str, Any]] = getattr(meta, "sanitizes", None) or {}
        if not isinstance(sanitizes, Mapping):
            raise TypeError(
                f"{model_name}.Meta.sanitizes must map attribute names to transforms, "
                f"got {type(sanitizes).__name__}"
            )
        self.sanitizes: Dict[str, Mapping[str, Any]] = dict(sanitizes)
        self.sanitizes_with: Any = getattr(meta, "sanitizes_with", None) if meta else None
        self.before_sanitization: List[Any] = _as_list(getattr(meta, "before_sanitization", None))
        self.after_sanitization: List[Any] = _as_list(getattr(meta, "after_sanitization", None))
        self.sanitization_applied = False

    @property
    def declares_sanitization(self) -> bool:
        return bool(
            self.sanitizes
            or self.sanitizes_with is not None
            or self.before_sanitization
            or self.after_sanitization
        )

    def __repr__(self) -> str:
        return f"<Options: {self.table_name}>"
