"""Account linking application services."""

from .credential_exchange_router import CredentialExchangeRouter

__all__ = [
    "CredentialExchangeRouter",
]
