"""
框选区域状态
"""
from __future__ import annotations

from typing import Optional

from ...core.logger import logger
from ..tree.types import Rect
from .events import EventChannel


class SelectionState:
    """操作者设置的搜索区域，运行中也可以随时修改"""

    def __init__(self) -> None:
        self._region: Optional[Rect] = None
        self.changed = EventChannel("selection_changed")
        self._log = logger.bind(module="SelectionState")

    @property
    def region(self) -> Optional[Rect]:
        return self._region

    def set(self, left: int, top: int, right: int, bottom: int) -> Rect:
        rect = Rect(int(left), int(top), int(right), int(bottom))
        if not rect.is_valid():
            raise ValueError(f"框选区域无效: {rect.as_tuple()}，要求 right > left 且 bottom > top")
        self._region = rect
        self._log.info("设置框选区域: {}", rect.as_tuple())
        self.changed.publish(rect)
        return rect

    def clear(self) -> None:
        self._region = None
        self._log.info("清除框选区域")
        self.changed.publish(None)


__all__ = ["SelectionState"]
