import pytest

from schulte.modules.engine.events import EventChannel
from schulte.modules.engine.selection import SelectionState
from schulte.modules.tree.types import Rect


def test_subscribe_returns_unsubscribe():
    channel = EventChannel("test")
    seen = []
    unsubscribe = channel.subscribe(seen.append)

    channel.publish(1)
    unsubscribe()
    channel.publish(2)

    assert seen == [1]
    assert len(channel) == 0


def test_failing_listener_does_not_block_others():
    channel = EventChannel("test")
    seen = []

    def _boom(value):
        raise RuntimeError("boom")

    channel.subscribe(_boom)
    channel.subscribe(seen.append)
    channel.publish("x")

    assert seen == ["x"]


def test_listener_may_unsubscribe_during_publish():
    channel = EventChannel("test")
    seen = []

    def _once(value):
        seen.append(value)
        channel.unsubscribe(_once)

    channel.subscribe(_once)
    channel.publish(1)
    channel.publish(2)

    assert seen == [1]


def test_selection_set_and_clear_notify():
    selection = SelectionState()
    seen = []
    selection.changed.subscribe(seen.append)

    rect = selection.set(10, 20, 110, 220)
    selection.clear()

    assert rect == Rect(10, 20, 110, 220)
    assert seen == [Rect(10, 20, 110, 220), None]
    assert selection.region is None


@pytest.mark.parametrize("coords", [(10, 10, 10, 20), (10, 10, 20, 10), (30, 10, 20, 40)])
def test_selection_rejects_degenerate_rect(coords):
    selection = SelectionState()
    with pytest.raises(ValueError):
        selection.set(*coords)
    assert selection.region is None
