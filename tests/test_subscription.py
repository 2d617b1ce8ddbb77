"""Unit tests to ensure handlers are properly subscribed and unsubscribed."""

import functools

import pytest

import event_registry


def test_subscribe_returns_handler() -> None:
    """Test that subscribe hands the exact handler back as a removal token."""
    registry = event_registry.Registry()
    registry.register("tick")

    def handler() -> None:
        pass

    token = registry.subscribe("tick", handler)

    assert token is handler
    assert registry.get_event_handlers("tick") == (handler,)


def test_subscribe_errors() -> None:
    """Test the usage errors of subscribe."""
    registry = event_registry.Registry()
    registry.register("tick")

    with pytest.raises(event_registry.MissingEventNameError):
        registry.subscribe("", lambda: None)

    with pytest.raises(event_registry.NotRegisteredError):
        registry.subscribe("tock", lambda: None)

    with pytest.raises(event_registry.MissingHandlerError):
        registry.subscribe("tick", None)

    with pytest.raises(event_registry.MissingHandlerError):
        registry.subscribe("tick", "not callable")

    assert registry.get_handler_count("tick") == 0


def test_subscribe_decorator() -> None:
    """Test that @registry.on subscribes and returns the function unchanged."""
    registry = event_registry.Registry()
    registry.register("double", [{"name": "value", "type": "number"}])
    results: list[int] = []

    @registry.on("double")
    def doubler(value: int) -> int:
        results.append(value * 2)
        return value * 2

    registry.publish("double", 5)

    assert results == [10]
    assert doubler(2) == 4
    assert registry.is_subscribed("double", doubler) is True


def test_arity_mismatch_rejected() -> None:
    """Test that handlers taking too few positional arguments are rejected."""
    registry = event_registry.Registry()
    registry.register(
        "move",
        [
            {"name": "x", "type": "number"},
            {"name": "y", "type": "number"},
            {"name": "label", "type": "string", "optional": True},
        ],
    )

    # noinspection PyUnusedLocal
    def one_arg(x: int) -> None:
        pass

    with pytest.raises(
        event_registry.ArityMismatchError, match="At least 2 expected, 1 found"
    ):
        registry.subscribe("move", one_arg)

    assert registry.get_handler_count("move") == 0


def test_arity_accepts_compatible_handlers() -> None:
    """Test that required-only, defaulted, *args and partial handlers pass."""
    registry = event_registry.Registry()
    registry.register(
        "move",
        [{"name": "x", "type": "number"}, {"name": "y", "type": "number"}],
    )

    # noinspection PyUnusedLocal
    def exact(x: int, y: int) -> None:
        pass

    # noinspection PyUnusedLocal
    def defaulted(x: int, y: int = 0, label: str = "") -> None:
        pass

    # noinspection PyUnusedLocal
    def star_args(*args: int) -> None:
        pass

    # noinspection PyUnusedLocal
    def three(prefix: str, x: int, y: int) -> None:
        pass

    class Mover(object):
        def move(self, x: int, y: int) -> None:
            pass

    registry.subscribe("move", exact)
    registry.subscribe("move", defaulted)
    registry.subscribe("move", star_args)
    registry.subscribe("move", functools.partial(three, "p"))
    registry.subscribe("move", Mover().move)

    assert registry.get_handler_count("move") == 5


def test_required_keyword_only_rejected() -> None:
    """Test that handlers needing keyword-only arguments are rejected."""
    registry = event_registry.Registry()
    registry.register("move", [{"name": "x", "type": "number"}])

    # noinspection PyUnusedLocal
    def needs_keyword(x: int, *, z: int) -> None:
        pass

    # noinspection PyUnusedLocal
    def defaulted_keyword(x: int, *, z: int = 0) -> None:
        pass

    with pytest.raises(event_registry.ArityMismatchError, match=r"\['z'\]"):
        registry.subscribe("move", needs_keyword)

    registry.subscribe("move", defaulted_keyword)

    assert registry.get_event_handlers("move") == (defaulted_keyword,)


def test_arity_check_can_be_disabled() -> None:
    """Test that check_handler_arity=False accepts any callable."""
    registry = event_registry.Registry(check_handler_arity=False)
    registry.register("move", [{"name": "x", "type": "number"}])

    registry.subscribe("move", lambda: None)

    assert registry.get_handler_count("move") == 1


def test_unsubscribe_single_handler() -> None:
    """Test removing one handler leaves the others."""
    registry = event_registry.Registry()
    registry.register("tick")
    calls: list[str] = []

    def first() -> None:
        calls.append("first")

    def second() -> None:
        calls.append("second")

    registry.subscribe("tick", first)
    registry.subscribe("tick", second)

    assert registry.unsubscribe("tick", first) is True
    registry.publish("tick")

    assert calls == ["second"]


def test_unsubscribe_removes_one_duplicate() -> None:
    """Test that only the first of duplicate subscriptions is removed."""
    registry = event_registry.Registry()
    registry.register("tick")
    calls: list[str] = []

    def handler() -> None:
        calls.append("handler")

    registry.subscribe("tick", handler)
    registry.subscribe("tick", handler)
    registry.unsubscribe("tick", handler)
    registry.publish("tick")

    assert calls == ["handler"]
    assert registry.get_handler_count("tick") == 1


def test_unsubscribe_unknown_handler_is_noop() -> None:
    """Test that removing a handler that isn't subscribed returns False."""
    registry = event_registry.Registry()
    registry.register("tick")

    def subscribed() -> None:
        pass

    registry.subscribe("tick", subscribed)

    assert registry.unsubscribe("tick", lambda: None) is False
    assert registry.get_handler_count("tick") == 1


def test_unsubscribe_matches_by_identity() -> None:
    """Test that equal but distinct bound methods aren't removed."""
    registry = event_registry.Registry()
    registry.register("tick")

    class Clock(object):
        def tick(self) -> None:
            pass

    clock = Clock()
    token = registry.subscribe("tick", clock.tick)

    assert registry.unsubscribe("tick", clock.tick) is False
    assert registry.unsubscribe("tick", token) is True


def test_unsubscribe_all() -> None:
    """Test that unsubscribing without a handler removes everything."""
    registry = event_registry.Registry()
    registry.register("tick")
    calls: list[str] = []

    registry.subscribe("tick", lambda: calls.append("a"))
    registry.subscribe("tick", lambda: calls.append("b"))

    assert registry.unsubscribe("tick") is True
    assert registry.publish("tick") is False
    assert calls == []
    assert registry.is_registered("tick") is True


def test_unsubscribe_errors() -> None:
    """Test the usage errors of unsubscribe."""
    registry = event_registry.Registry()

    with pytest.raises(event_registry.MissingEventNameError):
        registry.unsubscribe("")

    with pytest.raises(event_registry.NotRegisteredError):
        registry.unsubscribe("missing", lambda: None)
