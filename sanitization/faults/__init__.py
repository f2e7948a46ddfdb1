"""
Sanitization Faults - structured fault types.

Faults are typed exceptions carrying a stable code, a domain and a
severity, so callers can tell declaration mistakes (CONFIG) apart from
values a transform could not handle (TRANSFORM).

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- ConfigurationError / RuntimeTransformError: category aliases
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_SEVERITY,
)

from .domains import (
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
    ConfigurationError,
    RuntimeTransformError,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_SEVERITY",

    # Configuration
    "SanitizationConfigFault",
    "MissingAttributeFault",
    "EmptyTransformSetFault",
    "UnknownTransformFault",
    "InvalidTransformOptionsFault",
    "InvalidRecordSanitizerFault",
    "ModelNotProvisionedFault",
    "SettingsInvalidFault",
    "ConfigurationError",

    # Runtime
    "TransformFault",
    "UnsupportedCaseFault",
    "UnsupportedValueFault",
    "PipelineReentryFault",
    "RuntimeTransformError",

    # Model layer
    "StorageFault",
]
