"""Credential exchange exceptions."""

from typing import Any, Dict, Optional
from .base import LinkingError


class ExchangeCancelled(LinkingError):
    """Raised when the user dismisses the provider's sign-in prompt.
    
    Cancellation is silent: it never produces a user-visible error.
    """
    
    def __init__(
        self,
        message: str = "Credential exchange cancelled",
        *,
        provider_identifier: Optional[str] = None
    ) -> None:
        self.provider_identifier = provider_identifier
        super().__init__(
            message,
            details={"provider_identifier": provider_identifier}
        )


class CredentialExchangeError(LinkingError):
    """Raised when a provider handshake fails to produce a credential."""
    
    def __init__(
        self,
        message: str = "Credential exchange failed",
        *,
        provider_identifier: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.provider_identifier = provider_identifier
        self.reason = reason or "exchange_failed"
        self.context = context or {}
        super().__init__(
            message,
            details={
                "provider_identifier": provider_identifier,
                "reason": self.reason,
                **self.context,
            }
        )
    
    @classmethod
    def unsupported_provider(cls, provider_identifier: str) -> 'CredentialExchangeError':
        """Create exception for a provider with no registered exchange."""
        return cls(
            f"No credential exchange registered for provider '{provider_identifier}'",
            provider_identifier=provider_identifier,
            reason="unsupported_provider"
        )
    
    @classmethod
    def missing_credential(cls, provider_identifier: str) -> 'CredentialExchangeError':
        """Create exception for a handshake that completed without data."""
        return cls(
            "Unexpected sign in result: required authentication data is missing.",
            provider_identifier=provider_identifier,
            reason="missing_credential"
        )
