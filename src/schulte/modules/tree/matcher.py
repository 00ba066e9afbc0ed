"""
数字标签匹配

判断节点是否就是目标数字方格：
- text（或 accessibility_label）必须精确等于目标数字
- 必须是 1-2 位 ASCII 纯数字
- 自身及 3 级以内祖先的文本都不能包含 "level"（排除关卡标题里的数字）
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from ...core.constants import LEVEL_ANCESTOR_DEPTH, LEVEL_KEYWORD
from ...core.logger import logger
from .types import UiElement

# \d 会匹配全角等 Unicode 数字，这里只接受 ASCII
PURE_NUMBER_PATTERN = re.compile(r"[0-9]{1,2}")

_log = logger.bind(module="LabelMatcher")


def normalize_label(value: Optional[str]) -> Optional[str]:
    """去掉首尾空白，空串视为缺失"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_pure_number(text: str) -> bool:
    return PURE_NUMBER_PATTERN.fullmatch(text) is not None


def mentions_level(element: UiElement) -> bool:
    for value in (element.text, element.accessibility_label):
        if value and LEVEL_KEYWORD in value.lower():
            return True
    return False


def is_level_caption(element: UiElement, ancestors: Sequence[UiElement]) -> bool:
    """自身或最近 3 级祖先包含 "level" 时返回 True

    ancestors 按从根到父节点的顺序排列。
    """
    if mentions_level(element):
        return True
    nearest = list(ancestors[-LEVEL_ANCESTOR_DEPTH:])
    for depth, parent in enumerate(reversed(nearest), start=1):
        if mentions_level(parent):
            _log.trace("排除节点：第 {} 级父节点包含 'level'", depth)
            return True
    return False


def candidate_labels(element: UiElement) -> Iterable[tuple[str, str]]:
    """按优先级返回 (来源, 文本)：先 text，再 accessibility_label"""
    text = normalize_label(element.text)
    if text is not None:
        yield "text", text
    label = normalize_label(element.accessibility_label)
    if label is not None:
        yield "label", label


def matches(
    element: UiElement,
    target_number: int,
    ancestors: Sequence[UiElement] = (),
) -> bool:
    target_text = str(target_number)
    for source, value in candidate_labels(element):
        if value != target_text or not is_pure_number(value):
            continue
        if is_level_caption(element, ancestors):
            return False
        _log.trace("匹配到节点({}): {}", source, value)
        return True
    return False


__all__ = [
    "PURE_NUMBER_PATTERN",
    "normalize_label",
    "is_pure_number",
    "mentions_level",
    "is_level_caption",
    "candidate_labels",
    "matches",
]
