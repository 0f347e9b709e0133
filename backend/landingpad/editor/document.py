"""Data models for the website document edited in the editor."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from .defaults import DEFAULT_SETTINGS
from .merge import deep_merge, shallow_merge


@dataclass
class Element:
    id: str
    type: str
    content: Dict[str, Any]
    position: int
    settings: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "position": self.position,
        }
        if self.settings is not None:
            data["settings"] = self.settings
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Element":
        return cls(
            id=str(data["id"]),
            type=data.get("type", "custom"),
            content=data.get("content") or {},
            position=int(data.get("position", 0)),
            settings=data.get("settings"),
        )


@dataclass
class Page:
    id: str
    name: str
    slug: str
    is_home: bool = False
    elements: List[Element] = field(default_factory=list)

    def sorted_elements(self) -> List[Element]:
        return sorted(self.elements, key=lambda e: e.position)

    def find_element(self, element_id: str) -> Optional[Element]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def next_position(self) -> int:
        if not self.elements:
            return 0
        return max(e.position for e in self.elements) + 1

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "isHome": self.is_home,
            "elements": [e.to_dict() for e in self.elements],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Page":
        return cls(
            id=str(data["id"]),
            name=data.get("name", "Page"),
            slug=data.get("slug", ""),
            is_home=bool(data.get("isHome", False)),
            elements=[Element.from_dict(e) for e in data.get("elements", [])],
        )


@dataclass
class WebsiteSettings:
    """Theme settings; always fully populated from the defaults."""

    colors: Dict[str, str]
    fonts: Dict[str, str]
    global_styles: Dict[str, str]

    def to_dict(self) -> dict:
        return {
            "colors": dict(self.colors),
            "fonts": dict(self.fonts),
            "globalStyles": dict(self.global_styles),
        }

    def merged(self, partial: dict) -> "WebsiteSettings":
        """Return new settings with ``partial`` deep-merged in."""
        return WebsiteSettings.from_dict(deep_merge(self.to_dict(), partial))

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "WebsiteSettings":
        full = deep_merge(DEFAULT_SETTINGS, data or {})
        return cls(
            colors=full["colors"],
            fonts=full["fonts"],
            global_styles=full["globalStyles"],
        )


@dataclass
class Project:
    id: str
    name: str
    settings: WebsiteSettings
    pages: List[Page] = field(default_factory=list)

    def find_page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def home_page(self) -> Optional[Page]:
        for page in self.pages:
            if page.is_home:
                return page
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "settings": self.settings.to_dict(),
            "pages": [p.to_dict() for p in self.pages],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        return cls(
            id=str(data["id"]),
            name=data.get("name", "My Site"),
            settings=WebsiteSettings.from_dict(data.get("settings")),
            pages=[Page.from_dict(p) for p in data.get("pages", [])],
        )


def apply_updates(obj: Any, updates: dict, exclude: tuple = ()) -> Any:
    """
    Build a copy of a dataclass instance with ``updates`` shallow-merged in.

    Keys that are not fields of the dataclass are ignored.
    """
    current = {f.name: getattr(obj, f.name) for f in fields(obj)}
    allowed = {k: v for k, v in updates.items() if k in current}
    return type(obj)(**shallow_merge(current, allowed, exclude=exclude))
