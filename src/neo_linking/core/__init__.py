"""Core account linking domain objects.

Components:
- entities: Providers and the provider catalog
- value_objects: Immutable snapshots, actions, results and list sections
- exceptions: Linking-specific domain exceptions
- protocols: Contracts for credential exchange, backend and events
- events: Selection lifecycle events

The core has no third-party dependencies.
"""

from .entities import Provider, ProviderCatalog
from .value_objects import (
    Credential,
    LinkedProviderSet,
    ProviderLinkState,
    ResolvedLinkState,
    LinkAction,
    LinkActionKind,
    ActionOutcome,
    ActionResult,
    SignInResult,
    ActionState,
    Item,
    Section,
)
from .exceptions import (
    LinkingError,
    ProviderNotFound,
    ExchangeCancelled,
    CredentialExchangeError,
    BackendFailure,
    RedundantLinkAction,
    InvalidStateTransition,
)
from .protocols import CredentialExchange, AuthBackend, EventPublisher
from .events import ActionStateChanged, LinkStateRefreshed, UserSignedIn

__all__ = [
    # Entities
    "Provider",
    "ProviderCatalog",
    
    # Value Objects
    "Credential",
    "LinkedProviderSet",
    "ProviderLinkState",
    "ResolvedLinkState",
    "LinkAction",
    "LinkActionKind",
    "ActionOutcome",
    "ActionResult",
    "SignInResult",
    "ActionState",
    "Item",
    "Section",
    
    # Exceptions
    "LinkingError",
    "ProviderNotFound",
    "ExchangeCancelled",
    "CredentialExchangeError",
    "BackendFailure",
    "RedundantLinkAction",
    "InvalidStateTransition",
    
    # Protocols
    "CredentialExchange",
    "AuthBackend",
    "EventPublisher",
    
    # Events
    "ActionStateChanged",
    "LinkStateRefreshed",
    "UserSignedIn",
]
