"""
Pipeline executor — applies a model's sanitization to one record.

A run walks a fixed sequence of states:

    IDLE -> RUNNING_BEFORE -> RUNNING_ATTRIBUTES
         -> RUNNING_RECORD_TRANSFORM -> RUNNING_AFTER -> DONE

A model with nothing configured goes straight from IDLE to DONE and its
hooks do not fire. A record of a subclass gets one run covering the
configs of its class and every base. A run that raises ends in FAILED;
attributes already written keep their sanitized values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Set

from .config import get_settings
from .faults import PipelineReentryFault, TransformFault

if TYPE_CHECKING:
    from .store import ModelConfig

logger = logging.getLogger("sanitization.pipeline")

__all__ = ["PipelineState", "SanitizationRun", "SanitizationPipeline"]


class PipelineState(Enum):
    """Pipeline run states."""
    IDLE = "idle"
    RUNNING_BEFORE = "running_before"
    RUNNING_ATTRIBUTES = "running_attributes"
    RUNNING_RECORD_TRANSFORM = "running_record_transform"
    RUNNING_AFTER = "running_after"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SanitizationRun:
    """Outcome of one pipeline run over one record."""
    record: Any
    state: PipelineState = PipelineState.IDLE
    transitions: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    error: Optional[BaseException] = None

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.transitions.append(state)

    @property
    def skipped(self) -> bool:
        """True when the run short-circuited without firing hooks."""
        return self.transitions == [PipelineState.IDLE, PipelineState.DONE]


class SanitizationPipeline:
    """
    Runs a ModelConfig against records.

    Instances are registered with the host as the pre-persist callback,
    so they are callable with the record as the only argument.
    """

    def __init__(self, config: "ModelConfig"):
        self.config = config
        self._active: Set[int] = set()
        self.last_run: Optional[SanitizationRun] = None

    def __call__(self, record: Any) -> SanitizationRun:
        return self.run(record)

    def applicable(self, record: Any) -> List["ModelConfig"]:
        """
        Configs this pipeline runs for ``record``, base classes first.

        When a class between this model and the record's class has a
        config of its own, that config's pipeline runs the record and the
        result here is empty.
        """
        configs = type(self.config).chain(type(record))
        if not any(config is self.config for config in configs):
            return [self.config]
        if configs[-1] is not self.config:
            return []
        return configs

    def run(self, record: Any) -> SanitizationRun:
        """
        Sanitize ``record`` in place.

        The configs of the record's class and its bases make up a single
        run: every before hook, then every attribute chain, then every
        record sanitizer, then every after hook.

        Raises:
            PipelineReentryFault: the record is already being sanitized
            TransformFault: a transform could not handle a value
        """
        configs = self.applicable(record)
        run = SanitizationRun(record)

        if all(config.is_empty() for config in configs):
            run.advance(PipelineState.DONE)
            self.last_run = run
            return run

        key = id(record)
        if key in self._active:
            raise PipelineReentryFault(self.config.model_name)

        self.last_run = run
        self._active.add(key)
        try:
            run.advance(PipelineState.RUNNING_BEFORE)
            for config in configs:
                config.before_sanitization.send(config.model, instance=record)

            run.advance(PipelineState.RUNNING_ATTRIBUTES)
            for config in configs:
                self._apply_attributes(config, record)

            run.advance(PipelineState.RUNNING_RECORD_TRANSFORM)
            for config in configs:
                if config.record_transform is not None:
                    config.record_transform.sanitize(record)

            run.advance(PipelineState.RUNNING_AFTER)
            for config in configs:
                config.after_sanitization.send(config.model, instance=record)

            run.advance(PipelineState.DONE)
        except BaseException as exc:
            run.error = exc
            run.advance(PipelineState.FAILED)
            raise
        finally:
            self._active.discard(key)

        return run

    def _apply_attributes(self, config: "ModelConfig", record: Any) -> None:
        host = config.host
        trace = get_settings().trace_steps

        for attribute, chain in list(config.attributes.items()):
            value = host.get_attribute(record, attribute)
            for step in chain:
                try:
                    value = step.apply(record, attribute, value)
                except TransformFault as fault:
                    fault.annotate(model=config.model_name, attribute=attribute, transform=step.name)
                    logger.log(
                        fault.severity.log_level,
                        f"Sanitizing {config.model_name}.{attribute} failed "
                        f"at '{step.name}': {fault.message}",
                    )
                    raise
                if trace:
                    logger.debug(f"{config.model_name}.{attribute} {step.name} -> {value!r}")
            host.set_attribute(record, attribute, value)

    def __repr__(self) -> str:
        return f"<SanitizationPipeline {self.config.model_name}>"
