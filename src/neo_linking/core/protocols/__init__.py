"""Account linking protocol contracts.

Contracts for the external collaborators the core depends on.
"""

from .credential_exchange import CredentialExchange
from .auth_backend import AuthBackend
from .event_publisher import EventPublisher

__all__ = [
    "CredentialExchange",
    "AuthBackend",
    "EventPublisher",
]
