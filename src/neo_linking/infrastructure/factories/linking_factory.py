"""Account linking component factory."""

import logging
from typing import Dict, Optional

from ...application.commands import LinkActionCoordinator, SignInCoordinator
from ...application.services import CredentialExchangeRouter
from ...config import LinkingSettings, get_settings
from ...core.entities import ProviderCatalog
from ...core.protocols import AuthBackend, CredentialExchange, EventPublisher
from ..adapters import CallbackCredentialExchange, InMemoryEventBus
from .keycloak_client_factory import KeycloakClientFactory

logger = logging.getLogger(__name__)


class LinkingFactory:
    """Builds and owns the coordinators for a running client.
    
    Keeps exactly one LinkActionCoordinator per user, so every selection
    for a user goes through the same serialized state machine.
    """
    
    def __init__(
        self,
        backend: AuthBackend,
        credential_exchange: CredentialExchange,
        catalog: Optional[ProviderCatalog] = None,
        event_publisher: Optional[EventPublisher] = None
    ):
        self.backend = backend
        self.credential_exchange = credential_exchange
        self.catalog = catalog or ProviderCatalog.default()
        self.event_publisher = event_publisher or InMemoryEventBus()
        
        self._coordinators: Dict[str, LinkActionCoordinator] = {}
        self._sign_in_coordinator: Optional[SignInCoordinator] = None
    
    @classmethod
    async def from_settings(
        cls,
        settings: Optional[LinkingSettings] = None,
        credential_exchange: Optional[CredentialExchange] = None,
        catalog: Optional[ProviderCatalog] = None,
        event_publisher: Optional[EventPublisher] = None
    ) -> 'LinkingFactory':
        """Create a factory backed by Keycloak.
        
        Without an explicit exchange, every catalog provider is routed to a
        CallbackCredentialExchange that the host completes from its
        provider SDK callbacks.
        """
        settings = settings or get_settings()
        catalog = catalog or ProviderCatalog.default()
        
        client_factory = KeycloakClientFactory(settings.keycloak_config())
        backend = await client_factory.create_link_adapter(settings.provider_aliases)
        
        if credential_exchange is None:
            credential_exchange = cls.callback_router(catalog, settings.credential_exchange_timeout)
        
        logger.info(f"Account linking configured against realm {settings.keycloak_realm}")
        return cls(backend, credential_exchange, catalog, event_publisher)
    
    @staticmethod
    def callback_router(
        catalog: ProviderCatalog,
        timeout_seconds: Optional[float] = None
    ) -> CredentialExchangeRouter:
        """Route every catalog provider to one callback exchange.
        
        The exchange is shared by every coordinator the factory builds. Only
        one prompt per provider can be open at a time, so a second prompt
        for the same provider fails with ``exchange_in_progress`` until the
        first is completed, failed or cancelled. Reach the exchange through
        ``router.exchange_for(provider_identifier)``.
        """
        router = CredentialExchangeRouter()
        router.register_many(catalog.identifiers(), CallbackCredentialExchange(timeout_seconds=timeout_seconds))
        return router
    
    def coordinator_for(self, user_id: str) -> LinkActionCoordinator:
        """Get the user's link coordinator, creating it on first use.
        
        All coordinators share the factory's credential exchange and
        backend. With the callback router built by ``from_settings``, an
        open prompt for a provider blocks prompts for that provider from
        other users and from sign-in until it ends.
        """
        coordinator = self._coordinators.get(user_id)
        if coordinator is None:
            coordinator = LinkActionCoordinator(
                user_id=user_id,
                catalog=self.catalog,
                backend=self.backend,
                credential_exchange=self.credential_exchange,
                event_publisher=self.event_publisher
            )
            self._coordinators[user_id] = coordinator
        return coordinator
    
    def release(self, user_id: str) -> None:
        """Forget a user's coordinator, e.g. after sign-out."""
        self._coordinators.pop(user_id, None)
    
    def sign_in_coordinator(self) -> SignInCoordinator:
        if self._sign_in_coordinator is None:
            self._sign_in_coordinator = SignInCoordinator(
                catalog=self.catalog,
                backend=self.backend,
                credential_exchange=self.credential_exchange,
                event_publisher=self.event_publisher
            )
        return self._sign_in_coordinator
