"""
Sanitization Model Layer — declarative in-memory models that sanitize on save.

Usage:
    from sanitization.models import Model, CharField, MemoryStorage, ModelRegistry

    ModelRegistry.set_storage(MemoryStorage())

    class Person(Model):
        table = "people"

        first_name = CharField(max_length=50)

        class Meta:
            sanitizes = {"first_name": {"strip": True, "case": "titlecase"}}

    ModelRegistry.create_tables()
    Person.create(first_name="  ada ").first_name   # "Ada"

Public API:
    - Model: Base class for all models
    - Fields: CharField, TextField, IntegerField, FloatField, DecimalField,
      BooleanField, AutoField
    - ModelRegistry: Global model registry and storage handle
    - MemoryStorage: In-memory tables
    - ModelStorageHost: Host binding used by Model
"""

from .base import Model
from .metaclass import ModelMeta
from .options import Options
from .registry import ModelRegistry
from .storage import MemoryStorage
from .host import ModelStorageHost, model_host

from .fields import (
    Field,
    FieldValidationError,
    UNSET,
    AutoField,
    IntegerField,
    FloatField,
    DecimalField,
    CharField,
    TextField,
    BooleanField,
)

__all__ = [
    "Model",
    "ModelMeta",
    "Options",
    "ModelRegistry",
    "MemoryStorage",
    "ModelStorageHost",
    "model_host",
    "Field",
    "FieldValidationError",
    "UNSET",
    "AutoField",
    "IntegerField",
    "FloatField",
    "DecimalField",
    "CharField",
    "TextField",
    "BooleanField",
]
