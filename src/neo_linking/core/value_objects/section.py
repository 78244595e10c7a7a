"""Toolkit-neutral list section value objects."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Item:
    """A single selectable list row."""
    
    title: str
    detail_title: Optional[str] = None
    is_checked: bool = False
    has_nested_content: bool = True
    is_editable: bool = False
    
    @property
    def selection_title(self) -> str:
        """Title used to resolve the row's provider on selection."""
        if self.is_editable and self.detail_title:
            return self.detail_title
        return self.title


@dataclass(frozen=True)
class Section:
    """A titled group of list rows."""
    
    header_description: Optional[str] = None
    footer_description: Optional[str] = None
    items: Tuple[Item, ...] = field(default_factory=tuple)
    
    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, 'items', tuple(self.items))
    
    def item(self, index: int) -> Item:
        return self.items[index]
