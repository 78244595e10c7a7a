"""Account linking infrastructure adapters."""

from .keycloak_link_adapter import KeycloakLinkAdapter
from .callback_credential_exchange import CallbackCredentialExchange
from .event_bus import InMemoryEventBus

__all__ = [
    "KeycloakLinkAdapter",
    "CallbackCredentialExchange",
    "InMemoryEventBus",
]
