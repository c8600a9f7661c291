"""Header hierarchy tracker for the headings that are open while scanning a page."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .documents import HIERARCHY_LEVELS, RADIO_HIERARCHY_LEVELS


@dataclass(frozen=True)
class HeadingFrame:
    """An open heading at a given depth."""

    level: int  # 0 (page title) .. 6 (h6)
    text: str
    anchor_id: Optional[str] = None


@dataclass(frozen=True)
class HierarchySnapshot:
    """Heading context captured at an emission boundary."""

    hierarchy: Dict[str, Optional[str]]  # hierarchy_lvl0 .. hierarchy_lvl6
    hierarchy_radio: Dict[str, Optional[str]]  # hierarchy_radio_lvl0 .. hierarchy_radio_lvl5
    level: int
    anchor: Optional[str]


class HeaderTracker:
    """Keeps at most one open heading per level, seeded with the page title at level 0."""

    def __init__(self, title: str = ""):
        self._frames: List[HeadingFrame] = [HeadingFrame(level=0, text=title)]

    @property
    def frames(self) -> List[HeadingFrame]:
        return list(self._frames)

    def observe_heading(self, level: int, text: str, anchor_id: Optional[str] = None) -> None:
        """
        Open a heading, closing every heading at the same or a deeper level.

        Args:
            level: Heading level (1-6 for h1-h6)
            text: Normalized heading text
            anchor_id: Value of the heading's id attribute, if any
        """
        # Pop frames that are at same or deeper level
        self._frames = [frame for frame in self._frames if frame.level < level]
        self._frames.append(HeadingFrame(level=level, text=text, anchor_id=anchor_id or None))

    def snapshot(self) -> HierarchySnapshot:
        """
        Capture the per-level heading texts, current depth and deepest anchor.

        Returns:
            HierarchySnapshot used to populate a SearchDocument
        """
        by_level = {frame.level: frame for frame in self._frames}

        hierarchy = {}
        hierarchy_radio = {}
        for i in range(HIERARCHY_LEVELS):
            frame = by_level.get(i)
            text = frame.text if frame and frame.text else None
            hierarchy[f"hierarchy_lvl{i}"] = text
            if i < RADIO_HIERARCHY_LEVELS:
                hierarchy_radio[f"hierarchy_radio_lvl{i}"] = text

        level = max((frame.level for frame in self._frames), default=0)

        anchored = [frame for frame in self._frames if frame.anchor_id is not None]
        anchor = max(anchored, key=lambda frame: frame.level).anchor_id if anchored else None

        return HierarchySnapshot(
            hierarchy=hierarchy,
            hierarchy_radio=hierarchy_radio,
            level=level,
            anchor=anchor,
        )
