"""Account linking infrastructure factories."""

from .keycloak_client_factory import KeycloakClientFactory
from .linking_factory import LinkingFactory

__all__ = [
    "KeycloakClientFactory",
    "LinkingFactory",
]
