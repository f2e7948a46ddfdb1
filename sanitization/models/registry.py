"""
Model Registry — global registry for all Model subclasses.

Tracks concrete models and the storage they persist to. Creating a
model's table is what provisions it for sanitization, so
create_tables() also applies any Meta declarations deferred until then.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type, TYPE_CHECKING

from ..faults import StorageFault

if TYPE_CHECKING:
    from .base import Model
    from .storage import MemoryStorage

logger = logging.getLogger("sanitization.models.registry")

__all__ = ["ModelRegistry"]


class ModelRegistry:
    """Global registry for all Model subclasses."""

    _models: Dict[str, Type[Model]] = {}
    _storage: Optional[MemoryStorage] = None

    @classmethod
    def register(cls, model_cls: Type[Model]) -> None:
        """Register a model class."""
        name = model_cls.__name__
        if name in cls._models and cls._models[name] is not model_cls:
            logger.debug(f"Model '{name}' re-registered")
        cls._models[name] = model_cls

    @classmethod
    def get(cls, name: str) -> Optional[Type[Model]]:
        return cls._models.get(name)

    @classmethod
    def all_models(cls) -> Dict[str, Type[Model]]:
        return dict(cls._models)

    @classmethod
    def set_storage(cls, storage: Optional[MemoryStorage]) -> None:
        """Set the storage all models persist to (None to detach)."""
        cls._storage = storage

    @classmethod
    def get_storage(cls) -> Optional[MemoryStorage]:
        return cls._storage

    @classmethod
    def require_storage(cls, table: str) -> MemoryStorage:
        if cls._storage is None:
            raise StorageFault(table, "no storage configured for ModelRegistry")
        return cls._storage

    @classmethod
    def create_tables(cls, storage: Optional[MemoryStorage] = None) -> List[str]:
        """Create tables for all registered models; returns the tables created."""
        target = storage or cls._storage
        if target is None:
            raise StorageFault("*", "no storage configured for ModelRegistry")

        created: List[str] = []
        for model_cls in cls._models.values():
            if model_cls._meta.abstract:
                continue
            if target.create_table(model_cls._table_name):
                created.append(model_cls._table_name)
            if target is cls._storage:
                model_cls._apply_meta_sanitization()
        return created

    @classmethod
    def drop_tables(cls, storage: Optional[MemoryStorage] = None) -> List[str]:
        """Drop all registered model tables."""
        target = storage or cls._storage
        if target is None:
            raise StorageFault("*", "no storage configured for ModelRegistry")

        dropped: List[str] = []
        for model_cls in reversed(list(cls._models.values())):
            if target.drop_table(model_cls._table_name):
                dropped.append(model_cls._table_name)
        return dropped

    @classmethod
    def reset(cls) -> None:
        """Clear registry (for testing)."""
        cls._models.clear()
        cls._storage = None
