import threading
import time
from types import SimpleNamespace

import pytest

from schulte.core.thread_pool import shutdown_pools
from schulte.modules.emu.async_adapter import AsyncDeviceAdapter
from schulte.modules.engine.gesture import GestureDispatcher
from schulte.modules.tree.types import Rect, UiElement

TILE = UiElement(bounds=Rect(100, 200, 200, 400), text="12")


class _SlowDevice:
    """input swipe 往返比手势超时还慢的设备"""

    def __init__(self, press_seconds: float) -> None:
        self.cfg = SimpleNamespace(adb_addr="slow-device:5555")
        self.press_seconds = press_seconds
        self.presses = []
        self.taps = []
        self._lock = threading.Lock()
        self._active = 0
        self.max_active = 0

    def press(self, x, y, dur_ms):
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            time.sleep(self.press_seconds)
            self.presses.append((x, y, dur_ms))
        finally:
            with self._lock:
                self._active -= 1

    def tap(self, x, y):
        self.taps.append((x, y))


@pytest.fixture(autouse=True)
def _reset_pools():
    shutdown_pools()
    yield
    shutdown_pools()


@pytest.mark.asyncio
async def test_slow_press_is_not_repeated_after_timeout():
    device = _SlowDevice(press_seconds=0.6)
    dispatcher = GestureDispatcher(AsyncDeviceAdapter(device))

    ok = await dispatcher.tap(TILE)

    assert ok is True
    assert device.presses == [(150, 300, 50)]
    assert device.taps == []


@pytest.mark.asyncio
async def test_failed_slow_presses_never_overlap():
    device = _SlowDevice(press_seconds=0.05)

    class _RejectingAdapter(AsyncDeviceAdapter):
        async def dispatch_gesture(self, points, duration_ms):
            await super().dispatch_gesture(points, duration_ms)
            return "cancelled"

    dispatcher = GestureDispatcher(_RejectingAdapter(device), timeout_ms=10, pause_ms=0)

    ok = await dispatcher.tap(TILE)

    assert ok is True
    assert len(device.presses) == 5
    assert device.max_active == 1
    assert device.taps == [(150, 300)]
