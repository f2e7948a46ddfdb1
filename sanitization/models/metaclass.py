"""
Model Metaclass — collects fields, parses Meta and registers models.

A concrete model is registered with ModelRegistry as soon as its class
body has run. Sanitization declared in Meta is applied at the same time
when the model's table already exists, and otherwise once it is created.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from .fields import AutoField, Field
from .options import Options

__all__ = ["ModelMeta"]


def _collect_fields(bases: Tuple[type, ...], namespace: Dict[str, Any]) -> Dict[str, Field]:
    """Inherited fields first, then the ones declared in this class body."""
    fields: Dict[str, Field] = {}
    for base in bases:
        fields.update(getattr(base, "_fields", {}))
    fields.update((key, value) for key, value in namespace.items() if isinstance(value, Field))
    return fields


class ModelMeta(type):
    """Metaclass for Model and its subclasses."""

    def __new__(mcs, name: str, bases: Tuple[type, ...], namespace: Dict[str, Any], **kwargs) -> ModelMeta:
        if not any(isinstance(base, ModelMeta) for base in bases):
            return super().__new__(mcs, name, bases, namespace)

        meta = namespace.pop("Meta", None)
        table = namespace.pop("table", None) or namespace.pop("table_name", None)
        opts = Options(name, meta, table)
        fields = _collect_fields(bases, namespace)

        if not opts.abstract and not any(f.primary_key for f in fields.values()):
            pk = AutoField()
            namespace["id"] = pk
            fields = {"id": pk, **fields}

        cls = super().__new__(mcs, name, bases, namespace)
        for field in fields.values():
            if field.model is None:
                field.model = cls

        cls._fields = fields
        cls._attr_names = list(fields)
        cls._meta = opts
        cls._table_name = opts.table_name
        cls._pk_attr = next((attr for attr, f in fields.items() if f.primary_key), "id")

        if not opts.abstract:
            from .registry import ModelRegistry
            ModelRegistry.register(cls)
            cls._apply_meta_sanitization()
        return cls
