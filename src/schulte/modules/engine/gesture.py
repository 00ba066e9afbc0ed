"""
点击手势分发

对匹配到的节点依次尝试 5 个候选点：
  中心 -> 偏上(30%) -> 偏下(70%) -> 偏左(30%) -> 偏右(70%)
每次尝试等待手势完成 / 取消 / 超时，成功即停止；全部失败后对节点执行一次兜底激活。
候选点之间严格串行，同一时刻只有一个手势在途：超时只是不再把该次尝试算作及时完成，
仍在途的手势要等它真正结束（或超过落地等待上限被取消）才会尝试下一个候选点，
期间若它报告完成，则按成功处理。
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

from ...core.constants import (
    CANDIDATE_PAUSE_MS,
    GESTURE_SETTLE_TIMEOUT_MS,
    GESTURE_TIMEOUT_MS,
    TAP_DURATION_MS,
    GestureOutcome,
)
from ...core.logger import logger
from ..tree.types import Rect, UiElement
from .types import GestureAttempt, GestureBackend, GestureRejected, Point, maybe_await


def candidate_points(bounds: Rect) -> List[Point]:
    center_x, center_y = bounds.center
    return [
        (center_x, center_y),
        (center_x, bounds.top + bounds.height * 0.3),
        (center_x, bounds.top + bounds.height * 0.7),
        (bounds.left + bounds.width * 0.3, center_y),
        (bounds.left + bounds.width * 0.7, center_y),
    ]


class GestureDispatcher:
    """唯一接触输入注入接口的组件"""

    def __init__(
        self,
        backend: GestureBackend,
        *,
        duration_ms: int = TAP_DURATION_MS,
        timeout_ms: int = GESTURE_TIMEOUT_MS,
        pause_ms: int = CANDIDATE_PAUSE_MS,
        settle_timeout_ms: int = GESTURE_SETTLE_TIMEOUT_MS,
    ) -> None:
        self.backend = backend
        self.duration_ms = duration_ms
        self.timeout_ms = timeout_ms
        self.pause_ms = pause_ms
        self.settle_timeout_ms = settle_timeout_ms
        self._log = logger.bind(module="GestureDispatcher")

    async def _settle(self, gesture: asyncio.Future, attempt: GestureAttempt) -> GestureOutcome:
        """等待已超时但仍在途的手势结束，只有它最终报告完成才算成功"""
        try:
            outcome = await asyncio.wait_for(gesture, timeout=self.settle_timeout_ms / 1000)
        except asyncio.TimeoutError:
            self._log.warning("位置 {} 的手势 {}ms 内仍未结束，已取消", attempt.index, self.settle_timeout_ms)
            return GestureOutcome.TIMED_OUT
        except Exception as e:
            self._log.debug("位置 {} 的手势超时后失败: {}", attempt.index, e)
            return GestureOutcome.TIMED_OUT
        if outcome == GestureOutcome.COMPLETED:
            self._log.debug("位置 {} 的手势超时后完成", attempt.index)
            return GestureOutcome.COMPLETED
        return GestureOutcome.TIMED_OUT

    async def _attempt(self, attempt: GestureAttempt) -> GestureOutcome:
        gesture: Optional[asyncio.Future] = None
        try:
            gesture = asyncio.ensure_future(
                maybe_await(
                    self.backend.dispatch_gesture([(attempt.x, attempt.y)], attempt.duration_ms)
                )
            )
            try:
                outcome = await asyncio.wait_for(
                    asyncio.shield(gesture), timeout=self.timeout_ms / 1000
                )
            except asyncio.TimeoutError:
                return await self._settle(gesture, attempt)
            return GestureOutcome(outcome)
        except asyncio.CancelledError:
            if gesture is not None:
                gesture.cancel()
            raise
        except GestureRejected as e:
            self._log.warning("手势未能分发: {}", e)
            return GestureOutcome.DISPATCH_REJECTED
        except Exception as e:
            self._log.error("执行点击失败: {}", e)
            return GestureOutcome.DISPATCH_REJECTED

    async def tap(self, element: UiElement, cancel: Optional[asyncio.Event] = None) -> bool:
        """点击节点，任一尝试成功返回 True

        cancel 在每个候选点之前检查，已置位时立即放弃（包括兜底激活）。
        """
        bounds = element.bounds
        self._log.debug("节点边界: {}", bounds.as_tuple())

        for index, (x, y) in enumerate(candidate_points(bounds)):
            if cancel is not None and cancel.is_set():
                self._log.warning("任务已停止，停止点击")
                return False

            attempt = GestureAttempt(index=index, x=x, y=y, duration_ms=self.duration_ms)
            attempt.outcome = await self._attempt(attempt)
            self._log.debug(
                "尝试位置 {}: ({:.1f}, {:.1f}) -> {}",
                attempt.index,
                attempt.x,
                attempt.y,
                attempt.outcome.value,
            )
            if attempt.outcome is GestureOutcome.COMPLETED:
                self._log.info("位置 {} 点击成功", index)
                return True

            await asyncio.sleep(self.pause_ms / 1000)

        if cancel is not None and cancel.is_set():
            self._log.warning("任务已停止，跳过兜底激活")
            return False

        self._log.warning("所有点击位置都失败了，尝试直接激活节点")
        try:
            activated = bool(await maybe_await(self.backend.activate_element(element)))
        except Exception as e:
            self._log.error("兜底激活失败: {}", e)
            return False
        self._log.debug("兜底激活结果: {}", activated)
        return activated


__all__ = ["GestureDispatcher", "candidate_points"]
