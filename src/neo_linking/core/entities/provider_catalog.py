"""Static registry of supported identity providers."""

from typing import Iterable, Iterator, Tuple, Union

from ..exceptions import ProviderNotFound
from .provider import Provider

APPLE = Provider("apple.com", "Apple")
GOOGLE = Provider("google.com", "Google")
TWITTER = Provider("twitter.com", "Twitter")


class ProviderCatalog:
    """Ordered, immutable catalog of identity providers.
    
    Declaration order is the display order of every list built from the
    catalog. Lookups are pure and fail fast with ProviderNotFound.
    """
    
    def __init__(self, providers: Iterable[Provider]):
        """Initialize catalog.
        
        Args:
            providers: Providers in display order
            
        Raises:
            ValueError: If identifiers or display names are duplicated
        """
        self._providers: Tuple[Provider, ...] = tuple(providers)
        self._by_identifier = {}
        self._by_display_name = {}
        
        for provider in self._providers:
            if provider.identifier in self._by_identifier:
                raise ValueError(f"Duplicate provider identifier: {provider.identifier}")
            if provider.display_name in self._by_display_name:
                raise ValueError(f"Duplicate provider display name: {provider.display_name}")
            
            self._by_identifier[provider.identifier] = provider
            self._by_display_name[provider.display_name] = provider
    
    @classmethod
    def default(cls) -> 'ProviderCatalog':
        """Create the catalog of providers supported out of the box."""
        return cls([APPLE, GOOGLE, TWITTER])
    
    def list(self) -> Tuple[Provider, ...]:
        """Get all providers in catalog order."""
        return self._providers
    
    def identifiers(self) -> Tuple[str, ...]:
        """Get all provider identifiers in catalog order."""
        return tuple(provider.identifier for provider in self._providers)
    
    def by_identifier(self, identifier: str) -> Provider:
        """Look up a provider by its stable identifier.
        
        Raises:
            ProviderNotFound: If no provider has this identifier
        """
        try:
            return self._by_identifier[identifier]
        except KeyError:
            raise ProviderNotFound.by_identifier(identifier, list(self._by_identifier))
    
    def by_display_name(self, name: str) -> Provider:
        """Look up a provider by its display name.
        
        Raises:
            ProviderNotFound: If no provider has this display name
        """
        try:
            return self._by_display_name[name]
        except KeyError:
            raise ProviderNotFound.by_display_name(name, list(self._by_display_name))
    
    def __contains__(self, item: Union[Provider, str]) -> bool:
        if isinstance(item, Provider):
            return self._by_identifier.get(item.identifier) == item
        return item in self._by_identifier
    
    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)
    
    def __len__(self) -> int:
        return len(self._providers)
    
    def __repr__(self) -> str:
        return f"ProviderCatalog({', '.join(self.identifiers())})"
