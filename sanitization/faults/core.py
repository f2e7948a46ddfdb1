"""
Sanitization Faults - Core types and fault taxonomy.

Every error the package raises on purpose is a Fault: an exception with a
stable code, the domain it belongs to and a severity. Declaration mistakes
live in CONFIG and are FATAL (the model cannot be used until the code is
fixed); values a transform could not handle live in TRANSFORM and reject
only the record at hand.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """Fault severity levels."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"     # the current record is rejected
    FATAL = "fatal"     # the model is unusable until fixed

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultDomain:
    """
    Functional area a fault belongs to.

    Compares equal to its name, so ``fault.domain == "config"`` works.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain({self.name!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return self.name == other

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Declaring sanitizers on a model")
FaultDomain.TRANSFORM = FaultDomain("transform", "Applying transforms to a record")
FaultDomain.MODEL = FaultDomain("model", "Bundled model layer and its storage")

DOMAIN_SEVERITY: Dict[FaultDomain, Severity] = {
    FaultDomain.CONFIG: Severity.FATAL,
    FaultDomain.TRANSFORM: Severity.ERROR,
    FaultDomain.MODEL: Severity.ERROR,
}


# ============================================================================
# Fault
# ============================================================================

class Fault(Exception):
    """
    Base fault class.

    ``code``, ``message`` and ``domain`` may be passed in or declared on a
    subclass:

        class ReadOnlyFault(Fault):
            code = "READ_ONLY"
            message = "Record is read-only"
            domain = FaultDomain.MODEL

    Attributes:
        code: stable identifier, e.g. "UNKNOWN_TRANSFORM"
        message: human-readable summary
        domain: FaultDomain
        severity: taken from the domain unless given
        metadata: context such as the model, attribute and transform involved
    """

    code: Optional[str] = None
    message: Optional[str] = None
    domain: Optional[FaultDomain] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.code = code or self.code
        self.message = message or self.message
        self.domain = domain or self.domain
        if not (self.code and self.message and self.domain):
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(self.message)
        self.severity = severity or DOMAIN_SEVERITY.get(self.domain, Severity.ERROR)
        self.metadata: Dict[str, Any] = dict(metadata or {})

    def annotate(self, **context: Any) -> "Fault":
        """Add context without overwriting what the raiser already recorded."""
        for key, value in context.items():
            self.metadata.setdefault(key, value)
        return self

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain}, severity={self.severity.value})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "domain": str(self.domain),
            "severity": self.severity.value,
            "metadata": self.metadata,
        }
