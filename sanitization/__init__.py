"""
Sanitization - declarative attribute sanitization for Python models.

A model declares, per attribute, an ordered chain of cleanup transforms
(strip, squish, case, truncate, gsub, nullify, ...) plus optional custom
sanitizers. The chain runs automatically before the record is persisted:

    from sanitization import sanitizes, sanitizes_with, ObjectHost

    sanitizes(Person, "first_name", strip=True, case="titlecase")
    sanitizes(Person, "phone", gsub={"pattern": r"[^0-9]", "replacement": ""})

    host = ObjectHost()
    host.fire(person)        # or sanitization.sanitize(person)

Declarative models that sanitize on save() live in sanitization.models.
"""

__version__ = "0.1.0"

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConfigurationError,
    RuntimeTransformError,
    SanitizationConfigFault,
    MissingAttributeFault,
    EmptyTransformSetFault,
    UnknownTransformFault,
    InvalidTransformOptionsFault,
    InvalidRecordSanitizerFault,
    ModelNotProvisionedFault,
    SettingsInvalidFault,
    TransformFault,
    UnsupportedCaseFault,
    UnsupportedValueFault,
    PipelineReentryFault,
    StorageFault,
)

# ============================================================================
# Settings
# ============================================================================

from .config import (
    SanitizationSettings,
    SettingsLoader,
    get_settings,
    set_settings,
    reset_settings,
    configure_logging,
)

# ============================================================================
# Transforms
# ============================================================================

from .transforms import (
    AttributeSanitizer,
    RecordSanitizer,
    FunctionSanitizer,
    TransformStep,
    TransformRegistry,
    default_registry,
    register_transform,
    register_record_transform,
    register_case,
)

# ============================================================================
# Core
# ============================================================================

from .signals import Signal, BEFORE_SANITIZATION, AFTER_SANITIZATION
from .host import PRE_PERSIST, ModelHost, ObjectHost
from .pipeline import PipelineState, SanitizationRun, SanitizationPipeline
from .store import AttributeConfig, ModelConfig
from .declarations import (
    sanitizes,
    sanitizes_with,
    before_sanitization,
    after_sanitization,
    sanitize,
    run_sanitization,
    get_config,
    configs_for,
)

__all__ = [
    "__version__",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ConfigurationError",
    "RuntimeTransformError",
    "SanitizationConfigFault",
    "MissingAttributeFault",
    "EmptyTransformSetFault",
    "UnknownTransformFault",
    "InvalidTransformOptionsFault",
    "InvalidRecordSanitizerFault",
    "ModelNotProvisionedFault",
    "SettingsInvalidFault",
    "TransformFault",
    "UnsupportedCaseFault",
    "UnsupportedValueFault",
    "PipelineReentryFault",
    "StorageFault",
    # Settings
    "SanitizationSettings",
    "SettingsLoader",
    "get_settings",
    "set_settings",
    "reset_settings",
    "configure_logging",
    # Transforms
    "AttributeSanitizer",
    "RecordSanitizer",
    "FunctionSanitizer",
    "TransformStep",
    "TransformRegistry",
    "default_registry",
    "register_transform",
    "register_record_transform",
    "register_case",
    # Core
    "Signal",
    "BEFORE_SANITIZATION",
    "AFTER_SANITIZATION",
    "PRE_PERSIST",
    "ModelHost",
    "ObjectHost",
    "PipelineState",
    "SanitizationRun",
    "SanitizationPipeline",
    "AttributeConfig",
    "ModelConfig",
    "sanitizes",
    "sanitizes_with",
    "before_sanitization",
    "after_sanitization",
    "sanitize",
    "run_sanitization",
    "get_config",
    "configs_for",
]
