"""Linked provider snapshot value object."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import FrozenSet, Iterable, Iterator


@dataclass(frozen=True)
class LinkedProviderSet:
    """Snapshot of the provider identifiers linked to a user account.
    
    The remote authentication service owns this set. The snapshot is
    fetched fresh before each decision and replaced wholesale after every
    successful link or unlink, never patched in place.
    """
    
    identifiers: FrozenSet[str] = frozenset()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    def __post_init__(self) -> None:
        if not isinstance(self.identifiers, frozenset):
            object.__setattr__(self, 'identifiers', frozenset(self.identifiers))
        
        if self.fetched_at.tzinfo is None:
            object.__setattr__(self, 'fetched_at', self.fetched_at.replace(tzinfo=timezone.utc))
    
    @classmethod
    def of(cls, identifiers: Iterable[str]) -> 'LinkedProviderSet':
        """Create a snapshot from any iterable of identifiers."""
        return cls(frozenset(identifiers))
    
    def contains(self, identifier: str) -> bool:
        return identifier in self.identifiers
    
    def restricted_to(self, catalog) -> 'LinkedProviderSet':
        """Drop identifiers the catalog does not know (password, anonymous...)."""
        known = set(catalog.identifiers())
        return LinkedProviderSet(
            frozenset(i for i in self.identifiers if i in known),
            self.fetched_at
        )
    
    def __contains__(self, identifier: object) -> bool:
        return identifier in self.identifiers
    
    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.identifiers))
    
    def __len__(self) -> int:
        return len(self.identifiers)
