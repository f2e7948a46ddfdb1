"""
Host contract — what sanitization needs from a persistence layer.

A host answers "does this model have that attribute", reads and writes
attributes on records, tells whether a model's storage exists yet, and
runs registered callbacks when a record is about to be persisted.

Two hosts ship with the package:
    ObjectHost              plain classes and dataclasses (this module)
    ModelStorageHost        sanitization.models.Model subclasses
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger("sanitization.host")

__all__ = [
    "PRE_PERSIST",
    "ModelHost",
    "ObjectHost",
    "default_host",
    "host_for",
]

PRE_PERSIST = "pre_persist"


class ModelHost(ABC):
    """Abstract host collaborator."""

    @abstractmethod
    def attribute_exists(self, model: type, name: str) -> bool:
        """Return True if records of ``model`` carry attribute ``name``."""

    def get_attribute(self, record: Any, name: str) -> Any:
        return getattr(record, name)

    def set_attribute(self, record: Any, name: str, value: Any) -> None:
        setattr(record, name, value)

    @abstractmethod
    def register_lifecycle_hook(self, model: type, phase: str, callback: Callable[[Any], Any]) -> None:
        """Arrange for ``callback(record)`` to run at ``phase`` for records of ``model``."""

    def is_provisioned(self, model: type) -> bool:
        """Whether the storage backing ``model`` exists yet."""
        return True


class ObjectHost(ModelHost):
    """
    Host for plain Python classes.

    Attributes are discovered from dataclass fields, annotations, slots
    and class-level attributes. There is no persistence event to hook
    into, so callers fire the lifecycle themselves:

        host.fire(record)             # before writing the record anywhere
    """

    HOOKS_ATTR = "_sanitization_lifecycle"

    def attribute_exists(self, model: type, name: str) -> bool:
        if name.startswith("__"):
            return False
        return name in self.attribute_names(model)

    def attribute_names(self, model: type) -> Set[str]:
        names: Set[str] = set()
        if dataclasses.is_dataclass(model):
            names.update(f.name for f in dataclasses.fields(model))
        for klass in model.__mro__:
            if klass is object:
                continue
            names.update(klass.__dict__.get("__annotations__", {}))
            slots = klass.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            names.update(slots)
            for key, value in klass.__dict__.items():
                if key.startswith("_"):
                    continue
                if isinstance(value, property):
                    if value.fset is not None:
                        names.add(key)
                elif not callable(value) and not isinstance(value, (classmethod, staticmethod)):
                    names.add(key)
        return names

    def register_lifecycle_hook(self, model: type, phase: str, callback: Callable[[Any], Any]) -> None:
        hooks: Optional[Dict[str, List[Callable]]] = model.__dict__.get(self.HOOKS_ATTR)
        if hooks is None:
            hooks = {}
            setattr(model, self.HOOKS_ATTR, hooks)
        hooks.setdefault(phase, []).append(callback)
        logger.debug(f"Registered {phase} hook for {model.__name__}")

    def hooks(self, model: type, phase: str = PRE_PERSIST) -> List[Callable]:
        """Callbacks for ``phase``, base classes first."""
        callbacks: List[Callable] = []
        for klass in reversed(model.__mro__):
            callbacks.extend(klass.__dict__.get(self.HOOKS_ATTR, {}).get(phase, ()))
        return callbacks

    def fire(self, record: Any, phase: str = PRE_PERSIST) -> Any:
        """Run every ``phase`` callback for ``record``; returns the record."""
        for callback in self.hooks(type(record), phase):
            callback(record)
        return record


_default_host: Optional[ObjectHost] = None


def default_host() -> ObjectHost:
    global _default_host
    if _default_host is None:
        _default_host = ObjectHost()
    return _default_host


def host_for(model: type) -> ModelHost:
    """The host a model class declares via ``__sanitization_host__``, else ObjectHost."""
    host = getattr(model, "__sanitization_host__", None)
    return host if host is not None else default_host()
