"""
Shared test fixtures and helpers for the sanitization test suite.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import pytest

from sanitization import ObjectHost, default_registry, reset_settings, set_settings
from sanitization.config import SanitizationSettings
from sanitization.models import MemoryStorage, ModelRegistry


# ============================================================================
# Global state
# ============================================================================


@pytest.fixture(autouse=True)
def clean_state():
    """Start every test with default settings, an empty registry and no storage."""
    set_settings(SanitizationSettings())
    default_registry().clear()
    ModelRegistry.reset()
    yield
    default_registry().clear()
    ModelRegistry.reset()
    reset_settings()


@pytest.fixture
def storage():
    """Fresh in-memory storage attached to the model registry."""
    store = MemoryStorage()
    ModelRegistry.set_storage(store)
    return store


@pytest.fixture
def host():
    return ObjectHost()


@pytest.fixture
def trace_logs(caplog):
    """Enable per-step tracing and capture pipeline DEBUG output."""
    set_settings(SanitizationSettings(trace_steps=True))
    caplog.set_level(logging.DEBUG, logger="sanitization")
    return caplog


# ============================================================================
# Record factories
# ============================================================================


def make_person_class():
    """A new plain record class per call, so declarations never leak between tests."""

    @dataclass
    class Person:
        first_name: Optional[str] = None
        last_name: Optional[str] = None
        phone: Optional[str] = None
        ssn: Optional[str] = None
        bio: Optional[str] = None
        score: Optional[float] = None

    return Person


@pytest.fixture
def person_cls():
    return make_person_class()


@pytest.fixture
def person_factory():
    return make_person_class
