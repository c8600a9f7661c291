"""Data classes for rendered pages and the search documents produced from them."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

HIERARCHY_LEVELS = 7  # lvl0 (page title) .. lvl6
RADIO_HIERARCHY_LEVELS = 6  # radio table stops at lvl5


@dataclass
class Page:
    """A rendered page handed over by the site build."""

    path: str  # Logical path, e.g. "/guide/intro.html"
    content_rendered: str  # Rendered HTML body
    title: str = ""
    lang: Optional[str] = None
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    excerpt: str = ""  # Rendered excerpt, non-empty when the page declares one

    @property
    def has_excerpt(self) -> bool:
        return bool(self.excerpt)

    @property
    def searchable(self) -> bool:
        """Pages opt out of the index with `search: false` in frontmatter."""
        return self.frontmatter.get("search") is not False

    @property
    def page_rank(self) -> float:
        rank = self.frontmatter.get("page_rank")
        if isinstance(rank, (int, float)) and not isinstance(rank, bool):
            return rank
        return 0


@dataclass(frozen=True)
class SearchDocument:
    """One search record: a contiguous block of page text under its heading context."""

    content: str
    url: str
    anchor: Optional[str]
    object_id: str
    lang: str
    level: int
    position: int
    hierarchy_lvl0: Optional[str] = None
    hierarchy_lvl1: Optional[str] = None
    hierarchy_lvl2: Optional[str] = None
    hierarchy_lvl3: Optional[str] = None
    hierarchy_lvl4: Optional[str] = None
    hierarchy_lvl5: Optional[str] = None
    hierarchy_lvl6: Optional[str] = None
    hierarchy_radio_lvl0: Optional[str] = None
    hierarchy_radio_lvl1: Optional[str] = None
    hierarchy_radio_lvl2: Optional[str] = None
    hierarchy_radio_lvl3: Optional[str] = None
    hierarchy_radio_lvl4: Optional[str] = None
    hierarchy_radio_lvl5: Optional[str] = None
    page_rank: float = 0

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the flat wire format shared by the JSON export and the stores.

        Every hierarchy field is always present; empty levels are None.

        Returns:
            Dictionary keyed by wire field names (note `objectID`)
        """
        data = {
            "content": self.content,
            "url": self.url,
            "anchor": self.anchor,
            "objectID": self.object_id,
            "lang": self.lang,
            "level": self.level,
            "position": self.position,
        }
        for i in range(HIERARCHY_LEVELS):
            data[f"hierarchy_lvl{i}"] = getattr(self, f"hierarchy_lvl{i}")
        for i in range(RADIO_HIERARCHY_LEVELS):
            data[f"hierarchy_radio_lvl{i}"] = getattr(self, f"hierarchy_radio_lvl{i}")
        data["page_rank"] = self.page_rank
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchDocument":
        """Rebuild a document from its wire format (e.g. a previously exported index)."""
        hierarchy = {f"hierarchy_lvl{i}": data.get(f"hierarchy_lvl{i}") for i in range(HIERARCHY_LEVELS)}
        radio = {
            f"hierarchy_radio_lvl{i}": data.get(f"hierarchy_radio_lvl{i}") for i in range(RADIO_HIERARCHY_LEVELS)
        }
        return cls(
            content=data.get("content", ""),
            url=data["url"],
            anchor=data.get("anchor"),
            object_id=data["objectID"],
            lang=data.get("lang") or "en",
            level=data.get("level", 0),
            position=data.get("position", 0),
            page_rank=data.get("page_rank", 0),
            **hierarchy,
            **radio,
        )
