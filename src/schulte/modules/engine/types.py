"""
引擎与外部协作者之间的契约

仅用于类型标注，具体实现见 modules/emu。
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, Protocol, Sequence, Tuple, Union

from ...core.constants import GestureOutcome
from ..tree.types import UiElement

Point = Tuple[float, float]


class GestureRejected(RuntimeError):
    """注入接口拒绝分发手势"""


@dataclass
class GestureAttempt:
    """单次点击尝试，仅用于日志，不保留"""
    index: int
    x: float
    y: float
    duration_ms: int
    outcome: Optional[GestureOutcome] = None


class TreeSnapshotProvider(Protocol):
    def get_tree_snapshot(self) -> Union[Optional[UiElement], Awaitable[Optional[UiElement]]]:
        """返回当前节点树根节点，不可用时返回 None（或抛出 SnapshotUnavailable）"""
        ...


class GestureBackend(Protocol):
    def dispatch_gesture(
        self, points: Sequence[Point], duration_ms: int
    ) -> Union[GestureOutcome, Awaitable[GestureOutcome]]:
        """分发单指手势，返回 COMPLETED / CANCELLED；拒绝分发时抛出 GestureRejected"""
        ...

    def activate_element(self, element: UiElement) -> Union[bool, Awaitable[bool]]:
        """绕过坐标直接激活节点（兜底点击）"""
        ...


async def maybe_await(result: Any) -> Any:
    """协作者既可以是同步实现也可以是异步实现"""
    if inspect.isawaitable(result):
        return await result
    return result


__all__ = [
    "Point",
    "GestureRejected",
    "GestureAttempt",
    "TreeSnapshotProvider",
    "GestureBackend",
    "maybe_await",
]
