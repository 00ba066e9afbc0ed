"""
节点树扫描器

深度优先、先序遍历，组合框选区域过滤与数字标签匹配，返回第一个命中的节点。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ...core.constants import LEVEL_ANCESTOR_DEPTH, MAX_SCAN_DEPTH
from ...core.logger import logger
from . import matcher
from .region import in_region
from .types import Rect, UiElement


@dataclass(frozen=True)
class ScanMatch:
    """命中的节点及其祖先链（从根到父节点）"""

    element: UiElement
    ancestors: Tuple[UiElement, ...] = ()

    def clickable_ancestor(self, max_levels: int = LEVEL_ANCESTOR_DEPTH) -> Optional[Tuple[int, UiElement]]:
        """返回 (层级, 节点)：max_levels 级以内第一个可点击的父节点"""
        nearest = self.ancestors[-max_levels:] if max_levels > 0 else ()
        for level, parent in enumerate(reversed(nearest), start=1):
            if parent.is_interactive:
                return level, parent
        return None

    def describe(self) -> str:
        text = self.element.describe()
        found = self.clickable_ancestor()
        if found is None:
            return f"{text}; 3 级以内无可点击父节点"
        level, parent = found
        return f"{text}; 第 {level} 级父节点可点击 class={parent.class_name or '-'} text={parent.text!r}"


class TreeScanner:
    """在节点树快照中查找目标数字"""

    def __init__(self, max_depth: int = MAX_SCAN_DEPTH) -> None:
        self.max_depth = max_depth
        self._log = logger.bind(module="TreeScanner")
        self._depth_capped = False

    def find_target(
        self,
        root: Optional[UiElement],
        target_number: int,
        region: Optional[Rect] = None,
    ) -> Optional[UiElement]:
        """返回第一个匹配目标数字的节点，未找到返回 None"""
        match = self.find_match(root, target_number, region)
        return match.element if match is not None else None

    def find_match(
        self,
        root: Optional[UiElement],
        target_number: int,
        region: Optional[Rect] = None,
    ) -> Optional[ScanMatch]:
        """同 find_target，额外带回命中节点的祖先链用于日志"""
        if root is None:
            return None
        self._depth_capped = False
        found = self._visit(root, target_number, region, [])
        if found is None and self._depth_capped:
            self._log.warning("节点树超过深度上限 {}，部分子树未扫描", self.max_depth)
        return found

    def _visit(
        self,
        node: UiElement,
        target_number: int,
        region: Optional[Rect],
        ancestors: List[UiElement],
    ) -> Optional[ScanMatch]:
        if len(ancestors) >= self.max_depth:
            self._depth_capped = True
            return None

        # 不在框选区域内只跳过匹配，子节点可能有独立的边界，仍需继续遍历
        if in_region(node.bounds, region) and matcher.matches(node, target_number, ancestors):
            return ScanMatch(node, tuple(ancestors))

        ancestors.append(node)
        try:
            for child in node.children:
                result = self._visit(child, target_number, region, ancestors)
                if result is not None:
                    return result
        finally:
            ancestors.pop()
        return None


__all__ = ["ScanMatch", "TreeScanner"]
