"""
舒尔特方格会话调度器

状态机：
    IDLE --start()--> SCANNING
    SCANNING: 快照不可用 -> 200ms 后重试；未找到 -> 100ms 后重试；找到 -> AWAITING
    AWAITING: 点击结束（无论成功与否）-> 目标数字 +1
        超过 grid_size -> COMPLETED，通知完成，冷却 3000ms 后回到 IDLE 并重新 start()
        否则 -> SCANNING，按 DelayController 的延迟调度下一次扫描
    stop(): 任意状态 -> IDLE，取消挂起的定时器，目标数字重置为 1

所有状态迁移都在同一个事件循环中执行；每次 tick 都由上一次 tick 结束时调度，
从不使用固定频率定时器。
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ...core.constants import (
    GRID_SIZE,
    MISS_RETRY_MS,
    RESTART_COOLDOWN_MS,
    SNAPSHOT_RETRY_MS,
    SessionStatus,
)
from ...core.logger import logger
from ..tree.hierarchy import SnapshotUnavailable
from ..tree.scanner import TreeScanner
from .delay import DelayController
from .events import EventChannel
from .gesture import GestureDispatcher
from .selection import SelectionState
from .types import TreeSnapshotProvider, maybe_await


@dataclass
class SchedulerTiming:
    snapshot_retry_ms: int = SNAPSHOT_RETRY_MS
    miss_retry_ms: int = MISS_RETRY_MS
    restart_cooldown_ms: int = RESTART_COOLDOWN_MS

    @classmethod
    def from_settings(cls, cfg: Any) -> "SchedulerTiming":
        return cls(
            snapshot_retry_ms=cfg.snapshot_retry_ms,
            miss_retry_ms=cfg.miss_retry_ms,
            restart_cooldown_ms=cfg.restart_cooldown_ms,
        )


class SessionScheduler:
    """会话调度器：扫描 -> 点击 -> 延迟，循环直到停止"""

    def __init__(
        self,
        provider: TreeSnapshotProvider,
        scanner: TreeScanner,
        dispatcher: GestureDispatcher,
        delay: DelayController,
        selection: SelectionState,
        *,
        grid_size: int = GRID_SIZE,
        timing: Optional[SchedulerTiming] = None,
    ) -> None:
        self.provider = provider
        self.scanner = scanner
        self.dispatcher = dispatcher
        self.delay = delay
        self.selection = selection
        self.grid_size = grid_size
        self.timing = timing or SchedulerTiming()

        self.status = SessionStatus.IDLE
        self.target_index = 1
        self.completed_cycles = 0
        self.completed = EventChannel("session_completed")

        # 每次 start() 递增；旧一轮遗留的 tick / 点击结果不得修改新一轮的状态
        self._generation = 0
        self._cancel = asyncio.Event()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._log = logger.bind(module="SessionScheduler")

    @property
    def is_running(self) -> bool:
        return self.status is not SessionStatus.IDLE

    @property
    def has_pending_tick(self) -> bool:
        return self._handle is not None

    # ── 对外操作 ──

    def start(self) -> bool:
        """IDLE 时启动一轮，其他状态下忽略"""
        if self.status is not SessionStatus.IDLE:
            self._log.warning("任务已经在运行中，忽略启动请求")
            return False
        self._log.info("===== 开始舒尔特方格任务 =====")
        self._generation += 1
        self._cancel = asyncio.Event()
        self.target_index = 1
        self.status = SessionStatus.SCANNING
        self._schedule_scan(self.delay.compute_next_delay())
        return True

    def stop(self) -> None:
        """任意状态下停止，可重复调用；冷却期内调用会取消自动重启"""
        if self.status is not SessionStatus.IDLE:
            self._log.info("===== 停止舒尔特方格任务 =====")
        self._cancel.set()
        self._cancel_pending()
        self.status = SessionStatus.IDLE
        self.target_index = 1

    # ── 定时器 ──

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._cancel.is_set()

    def _call_later(self, delay_ms: int, callback: Callable[[int], None]) -> None:
        self._cancel_pending()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(max(0, delay_ms) / 1000, callback, self._generation)

    def _schedule_scan(self, delay_ms: int) -> None:
        self._call_later(delay_ms, self._fire_scan)

    def _fire_scan(self, generation: int) -> None:
        self._handle = None
        if not self._is_current(generation):
            return
        # 上一轮 stop() 时可能仍有 tick 在等快照或手势，新 tick 要等它收尾
        previous = self._tick_task
        self._tick_task = asyncio.create_task(self._tick(generation, previous))

    # ── 扫描循环 ──

    async def _tick(self, generation: int, previous: Optional[asyncio.Task] = None) -> None:
        if previous is not None and not previous.done():
            self._log.debug("等待上一轮未结束的扫描 / 点击")
            await asyncio.wait([previous])
            if not self._is_current(generation):
                return
        try:
            next_delay = await self._scan_once(generation)
        except Exception as e:
            self._log.error("扫描数字 {} 异常: {}", self.target_index, e)
            next_delay = self.timing.miss_retry_ms
            if self._is_current(generation):
                self.status = SessionStatus.SCANNING
        if next_delay is not None and self._is_current(generation):
            self._schedule_scan(next_delay)

    async def _fetch_snapshot(self):
        try:
            return await maybe_await(self.provider.get_tree_snapshot())
        except SnapshotUnavailable as e:
            self._log.debug("节点树快照不可用: {}", e)
            return None

    async def _scan_once(self, generation: int) -> Optional[int]:
        """执行一次扫描，返回下一次扫描的延迟；None 表示不再由本 tick 调度"""
        target = self.target_index
        self._log.debug("开始搜索数字: {}", target)

        root = await self._fetch_snapshot()
        if not self._is_current(generation):
            return None
        if root is None:
            self._log.warning("无法获取节点树根节点，{}ms 后重试", self.timing.snapshot_retry_ms)
            return self.timing.snapshot_retry_ms

        match = self.scanner.find_match(root, target, self.selection.region)
        if match is None:
            self._log.debug("未找到数字: {}，继续搜索...", target)
            return self.timing.miss_retry_ms

        self._log.info("找到数字: {}", target)
        self._log.debug("节点信息 - {}", match.describe())
        element = match.element

        self.status = SessionStatus.AWAITING
        # 点击在独立任务中执行，stop() 通过 cancel 事件在候选点之间生效
        tapped = await asyncio.create_task(self.dispatcher.tap(element, self._cancel))
        if not self._is_current(generation):
            return None
        if not tapped:
            # 节点已定位但点不动，仍然前进到下一个数字
            self._log.warning("数字 {} 所有点击方式均失败，继续下一个数字", target)

        self.target_index += 1
        if self.target_index > self.grid_size:
            self._complete()
            return None

        self.status = SessionStatus.SCANNING
        return self.delay.compute_next_delay()

    def _complete(self) -> None:
        self.status = SessionStatus.COMPLETED
        self.completed_cycles += 1
        self._log.success("★★★ 舒尔特方格完成！准备重新开始 ★★★")
        # 先挂起重启，监听器在回调里 stop() 时才能取消它
        self._call_later(self.timing.restart_cooldown_ms, self._restart)
        self.completed.publish()

    def _restart(self, generation: int) -> None:
        self._handle = None
        if not self._is_current(generation):
            return
        self.target_index = 1
        self.status = SessionStatus.IDLE
        self.start()


__all__ = ["SessionScheduler", "SchedulerTiming"]
