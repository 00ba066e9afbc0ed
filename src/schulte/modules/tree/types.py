"""
节点树快照的数据结构

快照每次扫描由外部提供者重新生成，引擎只读不写，因此全部使用 frozen dataclass。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Rect:
    """屏幕坐标系下的轴对齐矩形 (left, top, right, bottom)"""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center(self) -> Tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2

    def is_valid(self) -> bool:
        return self.right > self.left and self.bottom > self.top

    def intersects(self, other: "Rect") -> bool:
        """是否相交，共享边也算相交"""
        return (
            self.left <= other.right
            and other.left <= self.right
            and self.top <= other.bottom
            and other.top <= self.bottom
        )

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.left, self.top, self.right, self.bottom


@dataclass(frozen=True)
class UiElement:
    """节点树中的一个元素"""

    bounds: Rect
    text: Optional[str] = None
    accessibility_label: Optional[str] = None
    children: Tuple["UiElement", ...] = ()
    is_interactive: bool = False
    # 以下仅用于日志
    node_id: str = ""
    class_name: str = ""
    resource_id: str = ""

    def describe(self) -> str:
        return (
            f"id={self.node_id or '-'} class={self.class_name or '-'} "
            f"text={self.text!r} label={self.accessibility_label!r} "
            f"clickable={self.is_interactive} bounds={self.bounds.as_tuple()}"
        )


__all__ = ["Rect", "UiElement"]
