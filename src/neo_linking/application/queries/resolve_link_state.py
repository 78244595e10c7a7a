"""Resolve link state query."""

import logging
from typing import Collection, Iterable, Optional, Union

from ...core.entities import Provider, ProviderCatalog
from ...core.exceptions import BackendFailure
from ...core.protocols import AuthBackend
from ...core.value_objects import LinkedProviderSet, ProviderLinkState, ResolvedLinkState

logger = logging.getLogger(__name__)


class LinkStateResolver:
    """Computes per-provider link flags following catalog order.
    
    Handles ONLY the mapping of a linked-identifier set onto the catalog.
    Identifiers the catalog does not know are dropped silently: they belong
    to sign-in methods the client does not render (password, anonymous).
    """
    
    def resolve(
        self,
        catalog_providers: Iterable[Provider],
        linked_identifiers: Union[LinkedProviderSet, Collection[str]]
    ) -> ResolvedLinkState:
        """Resolve link flags for every catalog provider.
        
        Args:
            catalog_providers: Providers in catalog order
            linked_identifiers: Identifiers currently linked to the user
            
        Returns:
            One row per catalog provider, in catalog order
        """
        if isinstance(linked_identifiers, LinkedProviderSet):
            linked = linked_identifiers.identifiers
        else:
            linked = frozenset(linked_identifiers)
        
        return ResolvedLinkState(tuple(
            ProviderLinkState(provider, provider.identifier in linked)
            for provider in catalog_providers
        ))


class ResolveLinkState:
    """Query that fetches a fresh linked-provider snapshot and resolves it.
    
    Never caches: every execution asks the backend, which owns the truth.
    """
    
    def __init__(
        self,
        backend: AuthBackend,
        catalog: ProviderCatalog,
        resolver: Optional[LinkStateResolver] = None
    ):
        self._backend = backend
        self._catalog = catalog
        self._resolver = resolver or LinkStateResolver()
    
    async def fetch_snapshot(self, user_id: str) -> LinkedProviderSet:
        """Fetch the user's linked providers from the backend.
        
        Raises:
            BackendFailure: If the backend cannot be queried
        """
        identifiers = await self._backend.current_linked_providers(user_id)
        snapshot = LinkedProviderSet.of(identifiers)
        
        unknown = snapshot.identifiers - set(self._catalog.identifiers())
        if unknown:
            logger.debug(f"Ignoring providers outside the catalog for user {user_id}: {sorted(unknown)}")
        
        return snapshot
    
    async def execute(self, user_id: str) -> ResolvedLinkState:
        """Fetch and resolve the user's current link state.
        
        Args:
            user_id: User whose link state to resolve
            
        Returns:
            Resolved link state in catalog order
            
        Raises:
            BackendFailure: If the backend cannot be queried
        """
        try:
            snapshot = await self.fetch_snapshot(user_id)
        except BackendFailure:
            logger.warning(f"Failed to fetch linked providers for user {user_id}")
            raise
        
        return self._resolver.resolve(self._catalog.list(), snapshot)
