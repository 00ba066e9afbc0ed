"""
异步 DeviceAdapter 包装器

将同步的 DeviceAdapter 方法通过设备单线程池转为异步方法，同时实现引擎需要的
TreeSnapshotProvider / GestureBackend 契约。

使用方式：
    adapter = AsyncDeviceAdapter(DeviceAdapter(cfg))
    engine = AutomationEngine(adapter, adapter)
"""
from __future__ import annotations

import functools
from typing import Sequence

from ...core.constants import GestureOutcome
from ...core.logger import logger
from ...core.thread_pool import run_in_device_io
from ..engine.types import GestureRejected, Point
from ..tree.types import UiElement
from .adapter import DeviceAdapter, DeviceConfig
from .adb import AdbError


class AsyncDeviceAdapter:
    """DeviceAdapter 的异步包装器（代理模式）。

    所有阻塞的 ADB 调用都 offload 到该设备专属的单线程池，
    同一设备上的 dump 与手势严格串行。
    """

    def __init__(self, adapter: DeviceAdapter) -> None:
        self._sync = adapter
        self._io_key = adapter.cfg.adb_addr
        self._log = logger.bind(module="AsyncDeviceAdapter", device=adapter.cfg.adb_addr)

    @property
    def sync(self) -> DeviceAdapter:
        """获取底层同步适配器。"""
        return self._sync

    @property
    def cfg(self) -> DeviceConfig:
        return self._sync.cfg

    async def _run(self, func, *args):
        return await run_in_device_io(self._io_key, func, *args)

    async def ensure_connected(self) -> bool:
        return await self._run(self._sync.ensure_connected)

    # ── TreeSnapshotProvider ──

    async def get_tree_snapshot(self) -> UiElement:
        return await self._run(self._sync.snapshot)

    # ── GestureBackend ──

    async def dispatch_gesture(self, points: Sequence[Point], duration_ms: int) -> GestureOutcome:
        if not points:
            raise GestureRejected("手势没有任何触点")
        x, y = points[0]
        try:
            await self._run(
                functools.partial(self._sync.press, round(x), round(y), duration_ms)
            )
        except AdbError as e:
            raise GestureRejected(str(e)) from e
        return GestureOutcome.COMPLETED

    async def activate_element(self, element: UiElement) -> bool:
        x, y = element.bounds.center
        try:
            await self._run(self._sync.tap, round(x), round(y))
        except AdbError as e:
            self._log.warning("直接激活节点失败: {}", e)
            return False
        return True
