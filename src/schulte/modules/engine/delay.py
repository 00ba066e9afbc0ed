"""
搜索延迟控制

保存当前扫描间隔，对输入做 [50, 999] 钳制，可选随机误差，并在变更时通知监听器。
"""
from __future__ import annotations

import random
from typing import Optional, Protocol

from ...core.constants import DEFAULT_DELAY_MS, DELAY_MAX_MS, DELAY_MIN_MS, JITTER_FACTOR
from ...core.logger import logger
from .events import EventChannel


class RandomSource(Protocol):
    def random(self) -> float:
        ...


def clamp_interval(ms: int) -> int:
    return max(DELAY_MIN_MS, min(DELAY_MAX_MS, int(ms)))


def jittered_delay(interval_ms: int, rng: RandomSource) -> int:
    """返回 [interval, interval * 1.8) 内均匀分布的延迟"""
    return int(interval_ms + interval_ms * JITTER_FACTOR * rng.random())


class DelayController:
    def __init__(
        self,
        interval_ms: int = DEFAULT_DELAY_MS,
        jitter_enabled: bool = False,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._interval = clamp_interval(interval_ms)
        self.jitter_enabled = jitter_enabled
        self._rng = rng or random.Random()
        self.changed = EventChannel("delay_changed")
        self._log = logger.bind(module="DelayController")

    def set_interval(self, ms: int) -> int:
        value = clamp_interval(ms)
        self._interval = value
        self._log.debug("设置搜索延迟: {}ms", value)
        self.changed.publish(value)
        return value

    def current_interval(self) -> int:
        return self._interval

    def set_jitter(self, enabled: bool) -> None:
        self.jitter_enabled = bool(enabled)
        self._log.info("随机误差: {}", "开启" if self.jitter_enabled else "关闭")

    def compute_next_delay(self) -> int:
        interval = self._interval
        if not self.jitter_enabled:
            self._log.trace("使用搜索延迟: {}ms", interval)
            return interval
        delay = jittered_delay(interval, self._rng)
        self._log.trace("启用误差，原延迟 {}ms，实际延迟 {}ms", interval, delay)
        return delay

    def add_listener(self, listener) -> None:
        self.changed.subscribe(listener)

    def remove_listener(self, listener) -> None:
        self.changed.unsubscribe(listener)


__all__ = ["DelayController", "RandomSource", "clamp_interval", "jittered_delay"]
