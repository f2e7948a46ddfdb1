"""
Host binding for sanitization.models.Model.

Attributes are the declared fields; a model is provisioned once the
registry has storage and the model's table exists; pre-persist callbacks
run from Model.full_clean(), before field validation.
"""

from __future__ import annotations

from typing import Any

from ..host import ObjectHost
from .registry import ModelRegistry

__all__ = ["ModelStorageHost", "model_host"]


class ModelStorageHost(ObjectHost):
    """Host for Model subclasses backed by ModelRegistry storage."""

    def attribute_exists(self, model: type, name: str) -> bool:
        return name in getattr(model, "_fields", {})

    def is_provisioned(self, model: type) -> bool:
        meta = getattr(model, "_meta", None)
        if meta is None or meta.abstract:
            return False
        storage = ModelRegistry.get_storage()
        return storage is not None and storage.data_source_exists(model._table_name)

    def get_attribute(self, record: Any, name: str) -> Any:
        return getattr(record, name, None)


model_host = ModelStorageHost()
