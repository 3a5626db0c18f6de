from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

UNCATEGORIZED = "uncategorized"


@dataclass(frozen=True)
class CategoryStyle:
    """Presentation of a main category on cards, sidebars and filters."""

    name: str
    label: str
    color: str
    recognized: bool

    @property
    def css_class(self) -> str:
        return f"category-{self.name}"


class CategoryRegistry:
    """The fixed set of recognised main categories.

    Unknown or missing categories never borrow another category's style: they
    resolve to the explicit `uncategorized` style.
    """

    def __init__(self, colors: Mapping[str, str], *, uncategorized_color: str = "#9e9e9e") -> None:
        self._styles: Dict[str, CategoryStyle] = {}
        for name, color in colors.items():
            key = str(name).strip().lower()
            if not key or key == UNCATEGORIZED:
                continue
            self._styles[key] = CategoryStyle(
                name=key,
                label=_label_for(key),
                color=str(color),
                recognized=True,
            )
        self._fallback = CategoryStyle(
            name=UNCATEGORIZED,
            label="Uncategorized",
            color=uncategorized_color,
            recognized=False,
        )

    @classmethod
    def from_config(cls, config) -> "CategoryRegistry":
        return cls(config.categories, uncategorized_color=config.uncategorized_color)

    @property
    def fallback(self) -> CategoryStyle:
        return self._fallback

    def names(self) -> List[str]:
        return sorted(self._styles)

    def is_recognized(self, name: Optional[str]) -> bool:
        return (name or "").strip().lower() in self._styles

    def resolve(self, name: Optional[str]) -> CategoryStyle:
        """Return the style for a main category (case-insensitive)."""

        return self._styles.get((name or "").strip().lower(), self._fallback)

    def all_styles(self) -> List[CategoryStyle]:
        return [self._styles[k] for k in sorted(self._styles)] + [self._fallback]


def _label_for(name: str) -> str:
    if len(name) <= 3:
        return name.upper()
    return name.replace("-", " ").title()
