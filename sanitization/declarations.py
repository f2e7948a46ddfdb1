"""
Declaration API — how model authors configure sanitization.

    from sanitization import sanitizes, sanitizes_with, before_sanitization

    @dataclass
    class Person:
        first_name: str = ""
        phone: str = ""

    sanitizes(Person, "first_name", strip=True, case="titlecase")
    sanitizes(Person, "phone", {"gsub": {"pattern": r"\\D", "replacement": ""}})
    sanitizes_with(Person, PersonSanitizer)

Declarations for a model whose storage is not provisioned yet are
skipped silently unless the ``skip_unprovisioned`` setting is off.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from .config import get_settings
from .faults import ModelNotProvisionedFault
from .host import ModelHost, host_for
from .pipeline import SanitizationRun
from .signals import AFTER_SANITIZATION, BEFORE_SANITIZATION
from .store import AttributeConfig, ModelConfig
from .transforms.registry import TransformRegistry

logger = logging.getLogger("sanitization.declarations")

__all__ = [
    "sanitizes",
    "sanitizes_with",
    "before_sanitization",
    "after_sanitization",
    "sanitize",
    "run_sanitization",
    "get_config",
    "configs_for",
]


def _provisioned_config(
    model: type,
    host: Optional[ModelHost],
    registry: Optional[TransformRegistry],
    what: str,
) -> Optional[ModelConfig]:
    host = host or host_for(model)
    if not host.is_provisioned(model):
        if get_settings().skip_unprovisioned:
            logger.debug(f"Storage for {model.__name__} not provisioned; skipping {what}")
            return None
        raise ModelNotProvisionedFault(model.__name__)
    return ModelConfig.ensure(model, host, registry)


def sanitizes(
    model: type,
    attribute: str,
    transforms: Optional[Mapping[str, Any]] = None,
    /,
    *,
    host: Optional[ModelHost] = None,
    registry: Optional[TransformRegistry] = None,
    **options: Any,
) -> Optional[AttributeConfig]:
    """
    Append transforms to the chain of ``model.attribute``.

    Transforms may be given as a mapping, as keyword arguments, or both
    (the mapping's entries come first). Returns the attribute's chain, or
    None when the declaration was skipped.
    """
    declared = dict(transforms or {})
    declared.update(options)

    config = _provisioned_config(model, host, registry, f"sanitizes({attribute!r})")
    if config is None:
        return None
    return config.configure(attribute, declared, registry)


def sanitizes_with(
    model: type,
    sanitizer: Any,
    *,
    host: Optional[ModelHost] = None,
    registry: Optional[TransformRegistry] = None,
) -> Any:
    """Set the whole-record sanitizer of ``model`` (class, instance or registered name)."""
    config = _provisioned_config(model, host, registry, "sanitizes_with")
    if config is None:
        return None
    return config.configure_whole_record(sanitizer, registry)


def _connect(name: str, model: type, receiver: Optional[Callable], host: Optional[ModelHost]):
    config = ModelConfig.ensure(model, host or host_for(model))
    signal = config.hook(name)
    if receiver is None:
        return signal.connect
    return signal.connect(receiver)


def before_sanitization(model: type, receiver: Optional[Callable] = None, *, host: Optional[ModelHost] = None):
    """
    Connect a receiver to run before any transform. Usable as a decorator:

        @before_sanitization(Person)
        def default_name(sender, instance, **kwargs):
            instance.first_name = instance.first_name or "anonymous"
    """
    return _connect(BEFORE_SANITIZATION, model, receiver, host)


def after_sanitization(model: type, receiver: Optional[Callable] = None, *, host: Optional[ModelHost] = None):
    """Connect a receiver to run after every transform, record sanitizer included."""
    return _connect(AFTER_SANITIZATION, model, receiver, host)


def get_config(model: type) -> Optional[ModelConfig]:
    """The ModelConfig declared on ``model`` itself, or None."""
    return ModelConfig.of(model)


def configs_for(model: type) -> List[ModelConfig]:
    """Configs declared on ``model`` and its bases, base classes first."""
    return ModelConfig.chain(model)


def run_sanitization(record: Any) -> Optional[SanitizationRun]:
    """Run the sanitization of ``record``'s class and its bases; None when nothing is declared."""
    configs = configs_for(type(record))
    if not configs:
        return None
    return configs[-1].pipeline.run(record)


def sanitize(record: Any) -> Any:
    """Sanitize ``record`` in place outside any persistence event; returns it."""
    run_sanitization(record)
    return record
