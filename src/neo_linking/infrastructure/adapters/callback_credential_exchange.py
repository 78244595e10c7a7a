"""Callback-driven credential exchange adapter."""

import asyncio
import logging
from typing import Callable, Dict, Optional

from ...core.exceptions import CredentialExchangeError, ExchangeCancelled
from ...core.value_objects import Credential

logger = logging.getLogger(__name__)


class CallbackCredentialExchange:
    """Bridges callback-style provider SDKs to an awaitable exchange.

    Handles ONLY parking the coordinator until the host reports the
    outcome of a provider prompt. The host starts its native flow from
    ``on_start`` and later calls ``complete``, ``fail`` or ``cancel``.
    The wait is unbounded unless a timeout is configured.
    """

    def __init__(
        self,
        on_start: Optional[Callable[[str], None]] = None,
        timeout_seconds: Optional[float] = None
    ):
        """Initialize callback exchange.

        Args:
            on_start: Called with the provider identifier when a prompt is needed
            timeout_seconds: Optional limit on how long to wait for the host
        """
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("Timeout must be positive")

        self._on_start = on_start
        self.timeout_seconds = timeout_seconds
        self._pending: Dict[str, asyncio.Future] = {}

    def is_pending(self, provider_identifier: str) -> bool:
        return provider_identifier in self._pending

    async def exchange(self, provider_identifier: str) -> Credential:
        """Wait for the host to deliver the provider's credential.

        Raises:
            ExchangeCancelled: If the host reports the prompt was dismissed
            CredentialExchangeError: If the host reports a failure, a prompt
                for this provider is already open, or the wait timed out
        """
        if provider_identifier in self._pending:
            raise CredentialExchangeError(
                f"A sign-in prompt for '{provider_identifier}' is already open",
                provider_identifier=provider_identifier,
                reason="exchange_in_progress"
            )

        future = asyncio.get_running_loop().create_future()
        self._pending[provider_identifier] = future

        try:
            if self._on_start is not None:
                self._on_start(provider_identifier)

            if self.timeout_seconds is None:
                return await future
            return await asyncio.wait_for(future, self.timeout_seconds)
        except asyncio.TimeoutError:
            raise CredentialExchangeError(
                f"Timed out waiting for '{provider_identifier}' sign-in",
                provider_identifier=provider_identifier,
                reason="exchange_timeout"
            )
        finally:
            self._pending.pop(provider_identifier, None)

    def complete(self, credential: Credential) -> None:
        """Deliver the credential produced by the provider prompt."""
        future = self._future_for(credential.provider_identifier)
        future.set_result(credential)

    def fail(self, provider_identifier: str, message: str, reason: str = "exchange_failed") -> None:
        """Report that the provider prompt failed."""
        future = self._future_for(provider_identifier)
        future.set_exception(CredentialExchangeError(
            message,
            provider_identifier=provider_identifier,
            reason=reason
        ))

    def cancel(self, provider_identifier: str) -> None:
        """Report that the user dismissed the provider prompt."""
        future = self._future_for(provider_identifier)
        future.set_exception(ExchangeCancelled(provider_identifier=provider_identifier))

    def _future_for(self, provider_identifier: str) -> asyncio.Future:
        future = self._pending.get(provider_identifier)
        if future is None or future.done():
            raise CredentialExchangeError(
                f"No sign-in prompt for '{provider_identifier}' is waiting",
                provider_identifier=provider_identifier,
                reason="no_pending_exchange"
            )
        return future
