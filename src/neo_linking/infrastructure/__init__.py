"""Account linking infrastructure.

External system adapters, repositories and factories.
"""

from .adapters import KeycloakLinkAdapter, CallbackCredentialExchange, InMemoryEventBus
from .repositories import InMemoryAuthBackend
from .factories import KeycloakClientFactory, LinkingFactory

__all__ = [
    "KeycloakLinkAdapter",
    "CallbackCredentialExchange",
    "InMemoryEventBus",
    "InMemoryAuthBackend",
    "KeycloakClientFactory",
    "LinkingFactory",
]
