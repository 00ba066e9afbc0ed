from .types import Rect, UiElement
from .matcher import is_pure_number, matches
from .region import in_region
from .scanner import ScanMatch, TreeScanner
from .hierarchy import SnapshotUnavailable, parse_hierarchy

__all__ = [
    "Rect",
    "UiElement",
    "is_pure_number",
    "matches",
    "in_region",
    "ScanMatch",
    "TreeScanner",
    "SnapshotUnavailable",
    "parse_hierarchy",
]
