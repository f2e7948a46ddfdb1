"""
Sanitization Signals — named hook points around a sanitization run.

Every ModelConfig owns two signals, ``before_sanitization`` and
``after_sanitization``. Receivers are plain callables invoked in
registration order as ``receiver(sender=model, instance=record)``.

Unlike fire-and-forget model signals, an exception raised by a receiver
is not swallowed: it aborts the run and reaches the caller of save().

Usage:
    from sanitization import before_sanitization

    def default_country(sender, instance, **kwargs):
        instance.country = instance.country or "US"

    before_sanitization(Address, default_country)
"""

from __future__ import annotations

import contextlib
import inspect
import logging
from typing import Any, Callable, List, Type

logger = logging.getLogger("sanitization.signals")

__all__ = [
    "Signal",
    "BEFORE_SANITIZATION",
    "AFTER_SANITIZATION",
    "HOOK_POINTS",
]

BEFORE_SANITIZATION = "before_sanitization"
AFTER_SANITIZATION = "after_sanitization"
HOOK_POINTS = (BEFORE_SANITIZATION, AFTER_SANITIZATION)


class Signal:
    """
    A hook point that receivers can connect to.

    Receivers are sync callables. They receive:
        sender   — the model class
        instance — the record being sanitized
        **kwargs — signal-specific keyword arguments

    Usage:
        hook = Signal("before_sanitization")

        @hook.connect
        def handler(sender, instance, **kwargs):
            instance.name = instance.name or "anonymous"

        hook.send(Person, instance=person)

        # Temporary connection
        with hook.connected(handler):
            hook.send(Person, instance=person)
    """

    def __init__(self, name: str):
        self.name = name
        self._receivers: List[Callable] = []

    def connect(self, receiver: Callable = None):
        """
        Connect a receiver function. Can be used as a decorator.

        Connecting the same callable twice keeps a single entry.
        """
        def _decorator(fn: Callable) -> Callable:
            self._add_receiver(fn)
            return fn

        if receiver is not None:
            return _decorator(receiver)
        return _decorator

    def _add_receiver(self, fn: Callable) -> None:
        if not callable(fn):
            raise TypeError(f"Signal '{self.name}' receiver must be callable, got {fn!r}")
        if inspect.iscoroutinefunction(fn):
            raise TypeError(
                f"Signal '{self.name}' runs synchronously; "
                f"async receiver {fn.__name__} cannot be connected"
            )
        if any(existing is fn for existing in self._receivers):
            return  # Already connected
        self._receivers.append(fn)

    def disconnect(self, receiver: Callable) -> bool:
        """
        Disconnect a receiver.

        Returns True if the receiver was found and removed.
        """
        for i, existing in enumerate(self._receivers):
            if existing is receiver:
                self._receivers.pop(i)
                return True
        return False

    def send(self, sender: Type, **kwargs) -> List[Any]:
        """
        Fire the signal, calling all connected receivers in order.

        Args:
            sender: The model class sending the signal
            **kwargs: Signal-specific arguments (usually ``instance``)

        Returns:
            List of return values from receivers
        """
        results = []
        for receiver in list(self._receivers):
            try:
                results.append(receiver(sender=sender, **kwargs))
            except Exception as exc:
                logger.error(
                    f"Signal '{self.name}' receiver {_receiver_name(receiver)} "
                    f"raised {exc.__class__.__name__}: {exc}"
                )
                raise
        return results

    @property
    def receivers(self) -> List[Callable]:
        """List of connected receiver functions, in call order."""
        return list(self._receivers)

    def has_listeners(self) -> bool:
        return bool(self._receivers)

    @contextlib.contextmanager
    def connected(self, fn: Callable):
        """
        Context manager for temporary signal connection.

        The receiver is automatically disconnected on exit.
        """
        self._add_receiver(fn)
        try:
            yield
        finally:
            self.disconnect(fn)

    def clear(self) -> None:
        """Remove all receivers (useful for testing)."""
        self._receivers.clear()

    def __len__(self) -> int:
        return len(self._receivers)

    def __repr__(self) -> str:
        return f"<Signal '{self.name}' receivers={len(self._receivers)}>"


def _receiver_name(receiver: Callable) -> str:
    return getattr(receiver, "__qualname__", None) or repr(receiver)
