"""Sign in with provider command."""

import logging
from typing import Optional

from ...core.entities import Provider, ProviderCatalog
from ...core.events import UserSignedIn
from ...core.exceptions import (
    BackendFailure,
    CredentialExchangeError,
    ExchangeCancelled,
    ProviderNotFound,
)
from ...core.protocols import AuthBackend, CredentialExchange, EventPublisher
from ...core.value_objects import ActionOutcome, SignInResult

logger = logging.getLogger(__name__)


class SignInCoordinator:
    """Signs a user in with the identity provider they picked.

    Handles ONLY sign-in orchestration: provider handshake, then backend
    sign-in, then a UserSignedIn event the host uses to leave the provider
    list. Like linking, one attempt runs at a time and cancellation by the
    user is silent.
    """

    def __init__(
        self,
        catalog: ProviderCatalog,
        backend: AuthBackend,
        credential_exchange: CredentialExchange,
        event_publisher: Optional[EventPublisher] = None
    ):
        self._catalog = catalog
        self._backend = backend
        self._credential_exchange = credential_exchange
        self._event_publisher = event_publisher
        self._in_flight = False

    @property
    def is_busy(self) -> bool:
        return self._in_flight

    async def select(self, display_name: str) -> SignInResult:
        """Handle a tap on the sign-in row titled with a provider's name.

        Raises:
            ProviderNotFound: If no catalog provider has this display name
        """
        return await self.sign_in(self._catalog.by_display_name(display_name))

    async def sign_in(self, provider: Provider) -> SignInResult:
        """Run the provider handshake and sign in with its credential.

        Args:
            provider: Catalog provider to sign in with

        Returns:
            Sign-in result carrying the backend user ID on success

        Raises:
            ProviderNotFound: If the provider is not in the catalog
        """
        if provider not in self._catalog:
            raise ProviderNotFound.by_identifier(provider.identifier, list(self._catalog.identifiers()))

        if self._in_flight:
            logger.info(f"Ignoring sign-in with {provider.identifier}: sign-in in flight")
            return SignInResult(ActionOutcome.IGNORED, provider=provider, reason="action_in_flight")

        self._in_flight = True
        try:
            try:
                credential = await self._credential_exchange.exchange(provider.identifier)
            except ExchangeCancelled as e:
                logger.info(f"Sign-in with {provider.identifier} cancelled")
                return SignInResult(ActionOutcome.CANCELLED, provider=provider, reason="cancelled", error=e)
            except CredentialExchangeError as e:
                logger.warning(f"Sign-in handshake with {provider.identifier} failed: {e.message}")
                return SignInResult(ActionOutcome.FAILED, provider=provider, reason=e.reason, error=e)

            try:
                user_id = await self._backend.sign_in(credential)
            except BackendFailure as e:
                logger.warning(f"Backend sign-in with {provider.identifier} failed: {e.message}")
                return SignInResult(ActionOutcome.FAILED, provider=provider, reason=e.reason, error=e)

            logger.info(f"User {user_id} signed in with {provider.identifier}")
            await self._publish(UserSignedIn(user_id=user_id, provider=provider))
            return SignInResult(ActionOutcome.SUCCESS, provider=provider, user_id=user_id)
        finally:
            self._in_flight = False

    async def _publish(self, event: UserSignedIn) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception:
            logger.exception(f"Failed to publish {event.event_type} for user {event.user_id}")
