"""
Sanitization Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults (raised while a model declares its sanitizers)
- TRANSFORM faults (raised while a record is being sanitized)
- MODEL faults (raised by the bundled model layer)
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class SanitizationConfigFault(Fault):
    """Base class for declaration-time configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            metadata=metadata,
        )


class MissingAttributeFault(SanitizationConfigFault):
    """Sanitizer declared for an attribute the model does not have."""

    def __init__(self, model: str, attribute: str, **kwargs):
        super().__init__(
            code="MISSING_ATTRIBUTE",
            message=f"missing attribute: {attribute} (model '{model}')",
            metadata={"model": model, "attribute": attribute, **kwargs.get("metadata", {})},
        )


class EmptyTransformSetFault(SanitizationConfigFault):
    """Sanitizer declared without any transform."""

    def __init__(self, model: str, attribute: str, **kwargs):
        super().__init__(
            code="EMPTY_TRANSFORM_SET",
            message=f"You need to supply at least one sanitization for '{model}.{attribute}'",
            metadata={"model": model, "attribute": attribute, **kwargs.get("metadata", {})},
        )


class UnknownTransformFault(SanitizationConfigFault):
    """Transform name is neither built in nor registered."""

    def __init__(self, name: str, reason: Optional[str] = None, **kwargs):
        message = f"Unknown sanitizer: '{name}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            code="UNKNOWN_TRANSFORM",
            message=message,
            metadata={"transform": name, **kwargs.get("metadata", {})},
        )


class InvalidTransformOptionsFault(SanitizationConfigFault):
    """Options given to a built-in transform have the wrong shape."""

    def __init__(self, name: str, options: Any, reason: str, **kwargs):
        super().__init__(
            code="INVALID_TRANSFORM_OPTIONS",
            message=f"Invalid options for sanitizer '{name}': {reason}",
            metadata={"transform": name, "options": options, "reason": reason, **kwargs.get("metadata", {})},
        )


class InvalidRecordSanitizerFault(SanitizationConfigFault):
    """Whole-record sanitizer does not expose sanitize(record)."""

    def __init__(self, sanitizer: Any, **kwargs):
        name = getattr(sanitizer, "__name__", None) or type(sanitizer).__name__
        super().__init__(
            code="INVALID_RECORD_SANITIZER",
            message=f"Record sanitizer '{name}' must implement sanitize(record)",
            metadata={"sanitizer": name, **kwargs.get("metadata", {})},
        )


class ModelNotProvisionedFault(SanitizationConfigFault):
    """Model storage is missing and skipping was disabled in settings."""

    def __init__(self, model: str, **kwargs):
        super().__init__(
            code="MODEL_NOT_PROVISIONED",
            message=f"Storage for model '{model}' is not provisioned",
            metadata={"model": model, **kwargs.get("metadata", {})},
        )


class SettingsInvalidFault(SanitizationConfigFault):
    """A settings value failed type validation."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="SETTINGS_INVALID",
            message=f"Setting '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# TRANSFORM Faults
# ============================================================================

class TransformFault(Fault):
    """Base class for faults raised while sanitizing a record."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.TRANSFORM,
            severity=severity,
            metadata=metadata,
        )


class UnsupportedCaseFault(TransformFault):
    """Case conversion identifier is not supported for the value."""

    def __init__(self, case: str, value: Any, **kwargs):
        super().__init__(
            code="UNSUPPORTED_CASE",
            message=f"Unsupported case '{case}' for {type(value).__name__}",
            metadata={"case": case, "value_type": type(value).__name__, **kwargs.get("metadata", {})},
        )


class UnsupportedValueFault(TransformFault):
    """Transform applied to a value of an unsupported shape."""

    def __init__(self, transform: str, value: Any, reason: str, **kwargs):
        super().__init__(
            code="UNSUPPORTED_VALUE",
            message=f"Sanitizer '{transform}' cannot handle {type(value).__name__}: {reason}",
            metadata={
                "transform": transform,
                "value_type": type(value).__name__,
                "reason": reason,
                **kwargs.get("metadata", {}),
            },
        )


class PipelineReentryFault(TransformFault):
    """Sanitization re-entered for a record that is already mid-run."""

    def __init__(self, model: str, **kwargs):
        super().__init__(
            code="PIPELINE_REENTRY",
            message=f"Sanitization of a '{model}' record re-entered while running",
            metadata={"model": model, **kwargs.get("metadata", {})},
        )


# ============================================================================
# MODEL Faults
# ============================================================================

class StorageFault(Fault):
    """Storage is not configured or a table is missing."""

    def __init__(self, table: str, reason: str, **kwargs):
        super().__init__(
            code="STORAGE_FAULT",
            message=f"Storage error for table '{table}': {reason}",
            domain=FaultDomain.MODEL,
            metadata={"table": table, "reason": reason, **kwargs.get("metadata", {})},
        )


# Names used by callers that think in terms of plain error categories
ConfigurationError = SanitizationConfigFault
RuntimeTransformError = TransformFault
