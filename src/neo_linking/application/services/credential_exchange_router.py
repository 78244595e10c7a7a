"""Per-provider credential exchange dispatch."""

import logging
from typing import Dict, Iterable, Optional

from ...core.exceptions import CredentialExchangeError
from ...core.protocols import CredentialExchange
from ...core.value_objects import Credential

logger = logging.getLogger(__name__)


class CredentialExchangeRouter:
    """Routes a provider handshake to the exchange registered for it.
    
    Each provider has its own sign-in flow (native account prompt, Google
    sign-in, generic OAuth). The router implements CredentialExchange
    itself, so coordinators depend on a single collaborator.
    """
    
    def __init__(self, exchanges: Optional[Dict[str, CredentialExchange]] = None):
        self._exchanges: Dict[str, CredentialExchange] = dict(exchanges or {})
    
    def register(self, provider_identifier: str, exchange: CredentialExchange) -> None:
        """Register the exchange that handles a provider."""
        if provider_identifier in self._exchanges:
            logger.debug(f"Replacing credential exchange for provider {provider_identifier}")
        self._exchanges[provider_identifier] = exchange
    
    def register_many(self, provider_identifiers: Iterable[str], exchange: CredentialExchange) -> None:
        """Register one exchange for several providers (e.g. generic OAuth)."""
        for provider_identifier in provider_identifiers:
            self.register(provider_identifier, exchange)
    
    def supports(self, provider_identifier: str) -> bool:
        return provider_identifier in self._exchanges
    
    def exchange_for(self, provider_identifier: str) -> CredentialExchange:
        """Get the exchange registered for a provider.
        
        Hosts use this to reach callback exchanges and report prompt outcomes.
        
        Raises:
            CredentialExchangeError: If no exchange is registered
        """
        exchange = self._exchanges.get(provider_identifier)
        if exchange is None:
            raise CredentialExchangeError.unsupported_provider(provider_identifier)
        return exchange
    
    async def exchange(self, provider_identifier: str) -> Credential:
        """Run the handshake registered for the provider.
        
        Raises:
            CredentialExchangeError: If no exchange is registered, or the
                exchange returned a credential for a different provider
            ExchangeCancelled: If the user dismissed the provider prompt
        """
        exchange = self.exchange_for(provider_identifier)
        
        credential = await exchange.exchange(provider_identifier)
        
        if credential is None:
            raise CredentialExchangeError.missing_credential(provider_identifier)
        
        if credential.provider_identifier != provider_identifier:
            raise CredentialExchangeError(
                f"Exchange for '{provider_identifier}' returned a credential "
                f"for '{credential.provider_identifier}'",
                provider_identifier=provider_identifier,
                reason="provider_mismatch"
            )
        
        return credential
