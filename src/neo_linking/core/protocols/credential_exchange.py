"""Credential exchange protocol contract."""

from typing import Protocol, runtime_checkable
from ..value_objects import Credential


@runtime_checkable
class CredentialExchange(Protocol):
    """Protocol for provider sign-in handshakes.
    
    Defines ONLY the contract for obtaining a credential from a provider.
    Implementations wrap vendor SDK flows (OAuth popups, native account
    prompts) and may wait indefinitely for the user.
    """
    
    async def exchange(self, provider_identifier: str) -> Credential:
        """Run the provider handshake and return its credential.
        
        Args:
            provider_identifier: Identifier of the provider to sign in with
            
        Returns:
            Credential issued by the provider
            
        Raises:
            ExchangeCancelled: If the user dismissed the provider prompt
            CredentialExchangeError: If the handshake failed
        """
        ...
