"""
Hook points (signals.py)
"""

import pytest

from sanitization.signals import AFTER_SANITIZATION, BEFORE_SANITIZATION, HOOK_POINTS, Signal


class Sender:
    pass


class TestSignal:

    def test_hook_point_names(self):
        assert HOOK_POINTS == (BEFORE_SANITIZATION, AFTER_SANITIZATION)

    def test_send_in_registration_order(self):
        hook = Signal("test")
        calls = []
        hook.connect(lambda sender, instance: calls.append(("a", instance)))
        hook.connect(lambda sender, instance: calls.append(("b", instance)))
        hook.send(Sender, instance=1)
        assert calls == [("a", 1), ("b", 1)]

    def test_receiver_arguments(self):
        hook = Signal("test")
        seen = {}

        def receiver(sender, **kwargs):
            seen["sender"] = sender
            seen.update(kwargs)

        hook.connect(receiver)
        hook.send(Sender, instance="record")
        assert seen == {"sender": Sender, "instance": "record"}

    def test_returns_results(self):
        hook = Signal("test")
        hook.connect(lambda sender, **kw: 1)
        hook.connect(lambda sender, **kw: 2)
        assert hook.send(Sender) == [1, 2]

    def test_decorator(self):
        hook = Signal("test")

        @hook.connect
        def receiver(sender, **kwargs):
            return "ok"

        assert receiver(Sender) == "ok"
        assert hook.receivers == [receiver]

    def test_connect_twice_keeps_one(self):
        hook = Signal("test")

        def receiver(sender, **kwargs):
            pass

        hook.connect(receiver)
        hook.connect(receiver)
        assert len(hook) == 1

    def test_disconnect(self):
        hook = Signal("test")

        def receiver(sender, **kwargs):
            pass

        hook.connect(receiver)
        assert hook.disconnect(receiver) is True
        assert hook.disconnect(receiver) is False
        assert not hook.has_listeners()

    def test_connected_context(self):
        hook = Signal("test")
        calls = []

        def receiver(sender, **kwargs):
            calls.append(sender)

        with hook.connected(receiver):
            hook.send(Sender)
        hook.send(Sender)
        assert calls == [Sender]
        assert len(hook) == 0

    def test_receiver_errors_propagate(self, caplog):
        hook = Signal("test")
        later = []

        def broken(sender, **kwargs):
            raise RuntimeError("boom")

        hook.connect(broken)
        hook.connect(lambda sender, **kwargs: later.append(1))
        with pytest.raises(RuntimeError, match="boom"):
            hook.send(Sender)
        assert later == []
        assert "raised RuntimeError: boom" in caplog.text

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            Signal("test").connect("not callable")

    def test_rejects_async_receiver(self):
        async def receiver(sender, **kwargs):
            pass

        with pytest.raises(TypeError, match="async"):
            Signal("test").connect(receiver)

    def test_clear_and_repr(self):
        hook = Signal("before_sanitization")
        hook.connect(lambda sender, **kwargs: None)
        assert repr(hook) == "<Signal 'before_sanitization' receivers=1>"
        hook.clear()
        assert len(hook) == 0
