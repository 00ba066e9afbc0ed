"""
框选区域过滤
"""
from __future__ import annotations

from typing import Optional

from .types import Rect


def in_region(bounds: Rect, region: Optional[Rect]) -> bool:
    """未设置框选区域时总是 True；否则要求与区域相交（共享边也算）"""
    if region is None:
        return True
    return bounds.intersects(region)


__all__ = ["in_region"]
