"""Account linking exceptions.

Domain exceptions for the linking platform, one concern per file.
"""

from .base import LinkingError
from .provider_not_found import ProviderNotFound
from .credential_exchange import ExchangeCancelled, CredentialExchangeError
from .backend_failure import BackendFailure
from .link_state import RedundantLinkAction, InvalidStateTransition

__all__ = [
    "LinkingError",
    "ProviderNotFound",
    "ExchangeCancelled",
    "CredentialExchangeError",
    "BackendFailure",
    "RedundantLinkAction",
    "InvalidStateTransition",
]
