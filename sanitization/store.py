"""
Configuration store — what a model declared.

One ModelConfig per model class, kept in the class ``__dict__`` so a
subclass never picks up its parent's declarations through attribute
lookup. Each configured attribute owns an ordered AttributeConfig; the
model owns at most one whole-record sanitizer and the two hook points.

Steps are appended, never replaced or deduplicated:

    config.configure("name", {"strip": True})
    config.configure("name", {"strip": True, "truncate": 4})
    # name runs strip, strip, truncate
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .faults import EmptyTransformSetFault, MissingAttributeFault
from .host import PRE_PERSIST, ModelHost
from .pipeline import SanitizationPipeline
from .signals import AFTER_SANITIZATION, BEFORE_SANITIZATION, Signal
from .transforms.base import TransformStep
from .transforms.registry import TransformRegistry, default_registry

logger = logging.getLogger("sanitization.store")

__all__ = ["AttributeConfig", "ModelConfig", "CONFIG_ATTR"]

CONFIG_ATTR = "_sanitization_config"


@dataclass
class AttributeConfig:
    """Ordered transform chain for one attribute."""

    name: str
    steps: List[TransformStep] = field(default_factory=list)

    def append(self, step: TransformStep) -> None:
        self.steps.append(step)

    @property
    def names(self) -> List[str]:
        return [step.name for step in self.steps]

    def __iter__(self) -> Iterator[TransformStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)


class ModelConfig:
    """
    Sanitization configuration owned by a model class.

    Attributes:
        model: the model class
        host: the host collaborator used to inspect and mutate records
        registry: resolves transform names at configuration time
        attributes: attribute name -> AttributeConfig, in declaration order
        record_transform: the whole-record sanitizer, if any
        before_sanitization / after_sanitization: hook points
    """

    def __init__(
        self,
        model: type,
        host: ModelHost,
        registry: Optional[TransformRegistry] = None,
    ):
        self.model = model
        self.host = host
        self.registry = registry or default_registry()
        self.attributes: Dict[str, AttributeConfig] = {}
        self.record_transform: Any = None
        self.before_sanitization = Signal(BEFORE_SANITIZATION)
        self.after_sanitization = Signal(AFTER_SANITIZATION)
        self.pipeline = SanitizationPipeline(self)

    # ── Lookup ───────────────────────────────────────────────────────

    @classmethod
    def of(cls, model: type) -> Optional["ModelConfig"]:
        """The config declared on ``model`` itself, or None."""
        return model.__dict__.get(CONFIG_ATTR)

    @classmethod
    def chain(cls, model: type) -> List["ModelConfig"]:
        """Configs declared on ``model`` and its bases, base classes first."""
        configs = (cls.of(klass) for klass in reversed(model.__mro__))
        return [config for config in configs if config is not None]

    @classmethod
    def ensure(
        cls,
        model: type,
        host: ModelHost,
        registry: Optional[TransformRegistry] = None,
    ) -> "ModelConfig":
        """
        Return the model's config, creating it on first use.

        Creation registers the pipeline with the host's pre-persist phase,
        so it happens once per model class.
        """
        config = cls.of(model)
        if config is not None:
            return config

        config = cls(model, host, registry)
        setattr(model, CONFIG_ATTR, config)
        host.register_lifecycle_hook(model, PRE_PERSIST, config.pipeline)
        logger.debug(f"Created sanitization config for {model.__name__}")
        return config

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def hook(self, name: str) -> Signal:
        if name == BEFORE_SANITIZATION:
            return self.before_sanitization
        if name == AFTER_SANITIZATION:
            return self.after_sanitization
        raise ValueError(f"Unknown hook point: {name!r}")

    def is_empty(self) -> bool:
        """True when there is nothing to run: no chains and no record sanitizer."""
        return not any(self.attributes.values()) and self.record_transform is None

    # ── Configuration ────────────────────────────────────────────────

    def configure(
        self,
        attribute: str,
        transforms: Mapping[str, Any],
        registry: Optional[TransformRegistry] = None,
    ) -> AttributeConfig:
        """
        Append ``transforms`` to the chain of ``attribute``.

        Every name is resolved before anything is appended, so a failing
        declaration leaves the existing chain untouched.

        Raises:
            MissingAttributeFault: the model has no such attribute
            EmptyTransformSetFault: ``transforms`` is empty
            UnknownTransformFault / InvalidTransformOptionsFault: from the registry
        """
        if not self.host.attribute_exists(self.model, attribute):
            raise MissingAttributeFault(self.model_name, attribute)
        if not transforms:
            raise EmptyTransformSetFault(self.model_name, attribute)

        registry = registry or self.registry
        steps = [registry.resolve(name, options) for name, options in transforms.items()]

        chain = self.attributes.get(attribute)
        if chain is None:
            chain = self.attributes[attribute] = AttributeConfig(attribute)
        for step in steps:
            chain.append(step)

        logger.debug(f"{self.model_name}.{attribute} sanitizes with {chain.names}")
        return chain

    def configure_whole_record(self, sanitizer: Any, registry: Optional[TransformRegistry] = None) -> Any:
        """
        Set the whole-record sanitizer, replacing any previous one.

        Raises:
            InvalidRecordSanitizerFault: no concrete sanitize(record)
            UnknownTransformFault: an unregistered name
        """
        resolved = (registry or self.registry).resolve_record(sanitizer)
        if self.record_transform is not None:
            logger.debug(f"Replacing record sanitizer of {self.model_name}")
        self.record_transform = resolved
        return resolved

    def __repr__(self) -> str:
        return (
            f"<ModelConfig {self.model_name} attributes={list(self.attributes)} "
            f"record_transform={self.record_transform!r}>"
        )
