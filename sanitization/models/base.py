"""
Model base — declarative records with sanitization on save.

Usage:
    from sanitization.models import Model, CharField, ModelRegistry, MemoryStorage

    ModelRegistry.set_storage(MemoryStorage())

    class Person(Model):
        table = "people"

        first_name = CharField(max_length=50)
        phone = CharField(max_length=20, null=True)

    Person.create_table()
    Person.sanitizes("first_name", strip=True, case="titlecase")
    Person.sanitizes("phone", gsub={"pattern": r"\\D", "replacement": ""})

    person = Person.create(first_name="  ada  ", phone="+1 (801) 111-3333")
    person.first_name   # "Ada"
    person.phone        # "18011113333"
"""

from __future__ import annotations

import decimal
import logging
from typing import Any, Callable, ClassVar, Dict, List, Optional

from .. import declarations
from ..config import get_settings
from ..faults import StorageFault
from ..host import PRE_PERSIST
from .fields import Field
from .host import model_host
from .metaclass import ModelMeta
from .options import Options
from .registry import ModelRegistry

logger = logging.getLogger("sanitization.models")

__all__ = ["Model"]


def _method_receiver(name: str) -> Callable:
    """Hook receiver that calls ``instance.<name>()``."""
    def receiver(sender: type, instance: Any, **kwargs: Any) -> Any:
        return getattr(instance, name)()
    receiver.__name__ = receiver.__qualname__ = name
    return receiver


class Model(metaclass=ModelMeta):
    """
    Model base class — subclass and declare fields.

    Sanitization runs before validation on every full_clean(), which
    save() and create() call:

        person = Person(first_name="  ada ")
        person.full_clean()      # sanitize, then validate fields
        person.save()            # full_clean() + write to storage
    """

    __sanitization_host__ = model_host

    _fields: ClassVar[Dict[str, Field]] = {}
    _meta: ClassVar[Options]
    _table_name: ClassVar[str] = ""
    _pk_attr: ClassVar[str] = "id"
    _attr_names: ClassVar[List[str]] = []

    def __init__(self, **kwargs: Any):
        """Create a model instance (in-memory, not persisted)."""
        unknown = set(kwargs) - set(self._fields)
        if unknown:
            raise TypeError(f"{self.__class__.__name__} got unexpected fields: {sorted(unknown)}")
        for attr_name, field in self._fields.items():
            if attr_name in kwargs:
                setattr(self, attr_name, kwargs[attr_name])
            elif field.has_default():
                setattr(self, attr_name, field.get_default())
            else:
                setattr(self, attr_name, None)

    def __repr__(self) -> str:
        pk_val = getattr(self, self._pk_attr, "?")
        return f"<{self.__class__.__name__} pk={pk_val}>"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, self.__class__):
            return False
        pk = getattr(self, self._pk_attr)
        return pk is not None and pk == getattr(other, other._pk_attr)

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, getattr(self, self._pk_attr, None)))

    # ── Sanitization declarations ────────────────────────────────────

    @classmethod
    def sanitizes(cls, attribute: str, transforms: Optional[Dict[str, Any]] = None, /, **options: Any):
        """Append transforms to an attribute's chain. See sanitization.sanitizes."""
        return declarations.sanitizes(cls, attribute, transforms, **options)

    sanitize = sanitizes

    @classmethod
    def sanitizes_with(cls, sanitizer: Any):
        return declarations.sanitizes_with(cls, sanitizer)

    @classmethod
    def before_sanitization(cls, receiver: Optional[Callable] = None):
        return declarations.before_sanitization(cls, receiver)

    @classmethod
    def after_sanitization(cls, receiver: Optional[Callable] = None):
        return declarations.after_sanitization(cls, receiver)

    @classmethod
    def sanitization_config(cls):
        return declarations.get_config(cls)

    @classmethod
    def _apply_meta_sanitization(cls) -> bool:
        """
        Apply the sanitization declared in Meta, once.

        Deferred while the model's table does not exist; ModelRegistry
        and create_table() call this again once it does.
        """
        opts = cls._meta
        if opts.abstract or opts.sanitization_applied or not opts.declares_sanitization:
            return False
        if not model_host.is_provisioned(cls) and get_settings().skip_unprovisioned:
            logger.debug(f"Deferring Meta sanitization of {cls.__name__} until its table exists")
            return False

        for attribute, transforms in opts.sanitizes.items():
            declarations.sanitizes(cls, attribute, transforms)
        if opts.sanitizes_with is not None:
            declarations.sanitizes_with(cls, opts.sanitizes_with)
        for receiver in opts.before_sanitization:
            if isinstance(receiver, str):
                receiver = _method_receiver(receiver)
            declarations.before_sanitization(cls, receiver)
        for receiver in opts.after_sanitization:
            if isinstance(receiver, str):
                receiver = _method_receiver(receiver)
            declarations.after_sanitization(cls, receiver)

        opts.sanitization_applied = True
        return True

    # ── Storage ──────────────────────────────────────────────────────

    @classmethod
    def create_table(cls) -> bool:
        """Create this model's table and apply deferred Meta sanitization."""
        storage = ModelRegistry.require_storage(cls._table_name)
        created = storage.create_table(cls._table_name)
        cls._apply_meta_sanitization()
        return created

    @classmethod
    def drop_table(cls) -> bool:
        storage = ModelRegistry.require_storage(cls._table_name)
        return storage.drop_table(cls._table_name)

    # ── Validation ───────────────────────────────────────────────────

    def full_clean(self) -> "Model":
        """
        Run pre-persist callbacks (sanitization), then validate and
        coerce every field.

        Raises:
            TransformFault: a transform could not handle a value
            FieldValidationError: a sanitized value is invalid
        """
        model_host.fire(self, PRE_PERSIST)
        for attr_name, field in self._fields.items():
            value = getattr(self, attr_name, None)
            setattr(self, attr_name, field.validate(value))
        return self

    def _row(self) -> Dict[str, Any]:
        return {
            attr_name: getattr(self, attr_name, None)
            for attr_name in self._attr_names
            if attr_name != self._pk_attr
        }

    # ── CRUD API ─────────────────────────────────────────────────────

    @classmethod
    def create(cls, **data: Any) -> "Model":
        """
        Create, sanitize, validate and persist a new record.

        Usage:
            person = Person.create(first_name="Ada")
        """
        instance = cls(**data)
        return instance.save()

    def save(self) -> "Model":
        """
        Save instance (insert or update).

        If PK is set, updates. Otherwise, inserts.
        """
        storage = ModelRegistry.require_storage(self._table_name)
        if not storage.data_source_exists(self._table_name):
            raise StorageFault(self._table_name, "table does not exist")
        self.full_clean()

        pk_val = getattr(self, self._pk_attr, None)
        if pk_val is not None:
            storage.update(self._table_name, pk_val, self._row())
        else:
            pk_val = storage.insert(self._table_name, self._row(), pk_name=self._pk_attr)
            setattr(self, self._pk_attr, pk_val)
        return self

    @classmethod
    def get(cls, pk: Any) -> Optional["Model"]:
        """Get a single record by primary key, or None."""
        storage = ModelRegistry.require_storage(cls._table_name)
        row = storage.fetch(cls._table_name, pk)
        if row is None:
            return None
        return cls.from_row(row)

    @classmethod
    def all(cls) -> List["Model"]:
        storage = ModelRegistry.require_storage(cls._table_name)
        return [cls.from_row(row) for row in storage.rows(cls._table_name)]

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Model":
        """Create model instance from a stored row, bypassing __init__."""
        instance = cls.__new__(cls)
        for attr_name, field in cls._fields.items():
            setattr(instance, attr_name, field.to_python(row.get(attr_name)))
        return instance

    def to_dict(self, *, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """Serialize model instance to dict."""
        exclude = set(exclude or [])
        result: Dict[str, Any] = {}
        for attr_name in self._fields:
            if attr_name in exclude:
                continue
            value = getattr(self, attr_name, None)
            if isinstance(value, decimal.Decimal):
                value = str(value)
            result[attr_name] = value
        return result


