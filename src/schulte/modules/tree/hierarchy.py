"""
uiautomator 层级 XML 解析

把 `uiautomator dump` 的输出转换为不可变的 UiElement 树：
- text          -> text
- content-desc  -> accessibility_label
- clickable     -> is_interactive
- bounds="[l,t][r,b]" -> Rect
"""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import List, Optional

from .matcher import normalize_label
from .types import Rect, UiElement

BOUNDS_PATTERN = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")
HIERARCHY_OPEN = b"<hierarchy"
HIERARCHY_CLOSE = b"</hierarchy>"

EMPTY_RECT = Rect(0, 0, 0, 0)


class SnapshotUnavailable(RuntimeError):
    """拿不到可用的节点树快照"""


def extract_hierarchy_xml(raw: bytes) -> bytes:
    """从 dump 原始输出中截取 <hierarchy>...</hierarchy>

    `uiautomator dump /dev/tty` 会在 XML 之后追加一行提示文字，部分设备前面还有警告。
    """
    start = raw.find(HIERARCHY_OPEN)
    if start == -1:
        raise SnapshotUnavailable("dump 输出中没有 hierarchy 节点")
    end = raw.find(HIERARCHY_CLOSE, start)
    if end == -1:
        raise SnapshotUnavailable("hierarchy 节点不完整")
    return raw[start : end + len(HIERARCHY_CLOSE)]


def parse_bounds(value: str) -> Rect:
    m = BOUNDS_PATTERN.fullmatch((value or "").strip())
    if not m:
        return EMPTY_RECT
    left, top, right, bottom = (int(v) for v in m.groups())
    return Rect(left, top, right, bottom)


def _to_element(node: ET.Element, node_id: str) -> UiElement:
    children = tuple(
        _to_element(child, f"{node_id}.{i}")
        for i, child in enumerate(c for c in node if c.tag == "node")
    )
    return UiElement(
        bounds=parse_bounds(node.get("bounds", "")),
        text=normalize_label(node.get("text")),
        accessibility_label=normalize_label(node.get("content-desc")),
        children=children,
        is_interactive=node.get("clickable") == "true",
        node_id=node_id,
        class_name=node.get("class", ""),
        resource_id=node.get("resource-id", ""),
    )


def parse_hierarchy(xml: bytes | str) -> UiElement:
    """解析层级 XML，返回根节点

    顶层有多个窗口节点时，包一层合成根节点，边界取各子节点的并集。
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    try:
        root = ET.fromstring(extract_hierarchy_xml(xml))
    except ET.ParseError as e:
        raise SnapshotUnavailable(f"层级 XML 解析失败: {e}") from e

    tops: List[UiElement] = [
        _to_element(node, str(i))
        for i, node in enumerate(n for n in root if n.tag == "node")
    ]
    if not tops:
        raise SnapshotUnavailable("层级 XML 中没有任何节点")
    if len(tops) == 1:
        return tops[0]

    bounds: Optional[Rect] = None
    for top in tops:
        bounds = top.bounds if bounds is None else bounds.union(top.bounds)
    return UiElement(bounds=bounds or EMPTY_RECT, children=tuple(tops), node_id="root")


__all__ = [
    "SnapshotUnavailable",
    "extract_hierarchy_xml",
    "parse_bounds",
    "parse_hierarchy",
]
