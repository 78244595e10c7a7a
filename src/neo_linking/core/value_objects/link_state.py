"""Resolved link state value objects."""

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from ..entities import Provider
from ..exceptions import ProviderNotFound


@dataclass(frozen=True)
class ProviderLinkState:
    """One catalog provider with its linked flag."""
    
    provider: Provider
    is_linked: bool


@dataclass(frozen=True)
class ResolvedLinkState:
    """Per-provider link flags for a user, in catalog order.
    
    Contains exactly one row per catalog provider. Equality compares rows,
    so callers can assert that a failed action left the state untouched.
    """
    
    rows: Tuple[ProviderLinkState, ...] = ()
    
    def __post_init__(self) -> None:
        if not isinstance(self.rows, tuple):
            object.__setattr__(self, 'rows', tuple(self.rows))
    
    def _find(self, provider: Union[Provider, str]) -> ProviderLinkState:
        identifier = provider.identifier if isinstance(provider, Provider) else provider
        for row in self.rows:
            if row.provider.identifier == identifier:
                return row
        raise ProviderNotFound.by_identifier(
            identifier,
            [row.provider.identifier for row in self.rows]
        )
    
    def is_linked(self, provider: Union[Provider, str]) -> bool:
        """Check whether a provider is linked.
        
        Raises:
            ProviderNotFound: If the provider is not part of this state
        """
        return self._find(provider).is_linked
    
    def linked_identifiers(self) -> Tuple[str, ...]:
        """Identifiers of linked providers, in catalog order."""
        return tuple(row.provider.identifier for row in self.rows if row.is_linked)
    
    @property
    def providers(self) -> Tuple[Provider, ...]:
        return tuple(row.provider for row in self.rows)
    
    def __getitem__(self, provider: Union[Provider, str]) -> bool:
        return self.is_linked(provider)
    
    def __iter__(self) -> Iterator[ProviderLinkState]:
        return iter(self.rows)
    
    def __len__(self) -> int:
        return len(self.rows)
    
    def to_dict(self) -> dict:
        """Map provider identifiers to linked flags."""
        return {row.provider.identifier: row.is_linked for row in self.rows}
