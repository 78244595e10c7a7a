"""Account linking platform.

Orchestrates identity provider sign-in and account linking against an
external authentication service.

Features:
- Provider catalog with stable display ordering
- Link state resolution against the backend's federated identities
- Serialized link/unlink selection workflow with lifecycle events
- Keycloak backend and callback-driven provider handshakes

Architecture:
- core/: Domain objects and contracts only
- application/: Queries and commands built on the contracts
- infrastructure/: Keycloak, in-memory and callback adapters
- config/: Settings and logging

Usage:
    from neo_linking import LinkingFactory

    factory = await LinkingFactory.from_settings()
    coordinator = factory.coordinator_for(user_id)
    link_state = await coordinator.refresh()
    result = await coordinator.select("Google")
"""

from .__version__ import __version__
from .core import (
    Provider,
    ProviderCatalog,
    LinkedProviderSet,
    ResolvedLinkState,
    LinkAction,
    ActionResult,
    ActionOutcome,
    ActionState,
    Credential,
    LinkingError,
    ProviderNotFound,
    ExchangeCancelled,
    CredentialExchangeError,
    BackendFailure,
)
from .application import (
    LinkStateResolver,
    LinkActionCoordinator,
    SignInCoordinator,
    CredentialExchangeRouter,
    build_link_sections,
    build_provider_sections,
)
from .infrastructure import InMemoryAuthBackend, LinkingFactory

__all__ = [
    "__version__",
    
    # Core
    "Provider",
    "ProviderCatalog",
    "LinkedProviderSet",
    "ResolvedLinkState",
    "LinkAction",
    "ActionResult",
    "ActionOutcome",
    "ActionState",
    "Credential",
    "LinkingError",
    "ProviderNotFound",
    "ExchangeCancelled",
    "CredentialExchangeError",
    "BackendFailure",
    
    # Application
    "LinkStateResolver",
    "LinkActionCoordinator",
    "SignInCoordinator",
    "CredentialExchangeRouter",
    "build_link_sections",
    "build_provider_sections",
    
    # Infrastructure
    "InMemoryAuthBackend",
    "LinkingFactory",
]
