"""
自动化引擎句柄

设备连接时创建、断开时关闭；持有方（Web 层 / 启动脚本）显式传递该句柄，
不再依赖进程级静态单例。
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from ...core.config import settings
from ...core.logger import logger
from ..tree.scanner import TreeScanner
from ..tree.types import Rect
from .delay import DelayController, RandomSource
from .events import EventChannel
from .gesture import GestureDispatcher
from .scheduler import SchedulerTiming, SessionScheduler
from .selection import SelectionState
from .types import GestureBackend, TreeSnapshotProvider


class AutomationEngine:
    def __init__(
        self,
        provider: TreeSnapshotProvider,
        backend: GestureBackend,
        *,
        config: Any = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        cfg = config or settings
        self.provider = provider
        self.backend = backend
        self.delay = DelayController(
            cfg.search_delay_ms,
            jitter_enabled=cfg.jitter_enabled,
            rng=rng,
        )
        self.selection = SelectionState()
        self.scanner = TreeScanner(max_depth=cfg.max_scan_depth)
        self.dispatcher = GestureDispatcher(
            backend,
            duration_ms=cfg.tap_duration_ms,
            timeout_ms=cfg.gesture_timeout_ms,
            pause_ms=cfg.candidate_pause_ms,
            settle_timeout_ms=cfg.gesture_settle_timeout_ms,
        )
        self.scheduler = SessionScheduler(
            provider,
            self.scanner,
            self.dispatcher,
            self.delay,
            self.selection,
            grid_size=cfg.grid_size,
            timing=SchedulerTiming.from_settings(cfg),
        )
        self._closed = False
        self._log = logger.bind(module="AutomationEngine")

    # ── 通知通道 ──

    @property
    def on_delay_changed(self) -> EventChannel:
        return self.delay.changed

    @property
    def on_selection_changed(self) -> EventChannel:
        return self.selection.changed

    @property
    def on_session_completed(self) -> EventChannel:
        return self.scheduler.completed

    # ── 操作者接口 ──

    @property
    def is_running(self) -> bool:
        return self.scheduler.is_running

    def start(self) -> bool:
        if self._closed:
            raise RuntimeError("引擎已关闭")
        return self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def set_interval(self, ms: int) -> int:
        return self.delay.set_interval(ms)

    def set_jitter(self, enabled: bool) -> None:
        self.delay.set_jitter(enabled)

    def set_selection(self, left: int, top: int, right: int, bottom: int) -> Rect:
        return self.selection.set(left, top, right, bottom)

    def clear_selection(self) -> None:
        self.selection.clear()

    def snapshot(self) -> Dict[str, Any]:
        region = self.selection.region
        return {
            "running": self.is_running,
            "status": self.scheduler.status.value,
            "target_index": self.scheduler.target_index,
            "grid_size": self.scheduler.grid_size,
            "interval_ms": self.delay.current_interval(),
            "jitter_enabled": self.delay.jitter_enabled,
            "selection": list(region.as_tuple()) if region else None,
            "completed_cycles": self.scheduler.completed_cycles,
        }

    def close(self) -> None:
        """断开连接时调用：停止会话并清空所有监听器"""
        if self._closed:
            return
        self.scheduler.stop()
        for channel in (self.on_delay_changed, self.on_selection_changed, self.on_session_completed):
            channel.clear()
        self._closed = True
        self._log.info("自动化引擎已关闭")


def connect_adb_engine(config: Any = None) -> AutomationEngine:
    """基于 ADB 设备构建引擎"""
    from ..emu.adapter import DeviceAdapter, DeviceConfig
    from ..emu.async_adapter import AsyncDeviceAdapter

    cfg = config or settings
    adapter = AsyncDeviceAdapter(DeviceAdapter(DeviceConfig.from_settings(cfg)))
    return AutomationEngine(adapter, adapter, config=cfg)


__all__ = ["AutomationEngine", "connect_adb_engine"]
