"""Handle provider selection command."""

import logging
from typing import Any, Optional

from ...core.entities import Provider, ProviderCatalog
from ...core.events import ActionStateChanged, LinkStateRefreshed
from ...core.exceptions import (
    BackendFailure,
    CredentialExchangeError,
    ExchangeCancelled,
    InvalidStateTransition,
    ProviderNotFound,
    RedundantLinkAction,
)
from ...core.protocols import AuthBackend, CredentialExchange, EventPublisher
from ...core.value_objects import (
    ActionResult,
    ActionState,
    LinkAction,
    ResolvedLinkState,
)
from ..queries import LinkStateResolver, ResolveLinkState

logger = logging.getLogger(__name__)


class LinkActionCoordinator:
    """Turns a provider row selection into one link or unlink request.

    Handles ONLY the per-user selection workflow:
    Idle -> CredentialPending -> RequestInFlight -> Resolved | Failed.
    Does not render rows, run provider handshakes or talk to the vendor
    SDK directly; those are injected collaborators.

    One coordinator serves one signed-in user. Selections are serialized:
    a selection made while another is pending returns an IGNORED result
    without touching the backend.
    """

    def __init__(
        self,
        user_id: str,
        catalog: ProviderCatalog,
        backend: AuthBackend,
        credential_exchange: CredentialExchange,
        event_publisher: Optional[EventPublisher] = None,
        resolver: Optional[LinkStateResolver] = None
    ):
        """Initialize coordinator with protocol dependencies.

        Args:
            user_id: Signed-in user whose providers are managed
            catalog: Providers shown to the user
            backend: Remote authentication service
            credential_exchange: Provider handshake for link requests
            event_publisher: Optional sink for lifecycle events
            resolver: Optional link state resolver override
        """
        if not user_id:
            raise ValueError("User ID is required")

        self.user_id = user_id
        self._catalog = catalog
        self._backend = backend
        self._credential_exchange = credential_exchange
        self._event_publisher = event_publisher
        self._link_state_query = ResolveLinkState(backend, catalog, resolver)

        self._state = ActionState.IDLE
        self._in_flight = False
        self._current_link_state: Optional[ResolvedLinkState] = None

        # Bumped on every replacement; refreshes that started earlier are stale
        self._generation = 0

    @property
    def state(self) -> ActionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        """Check if a selection is being processed."""
        return self._in_flight

    @property
    def current_link_state(self) -> Optional[ResolvedLinkState]:
        """Last published link state, None before the first refresh."""
        return self._current_link_state

    async def refresh(self) -> ResolvedLinkState:
        """Fetch, resolve and publish the user's current link state.

        A fetch that completes after a newer state was published (for
        example by a selection that finished meanwhile) is discarded and
        the newer state is returned instead.

        Raises:
            BackendFailure: If the backend cannot be queried
        """
        generation = self._generation
        link_state = await self._link_state_query.execute(self.user_id)

        if generation != self._generation:
            logger.debug(f"Discarding stale link state refresh for user {self.user_id}")
            return self._current_link_state

        await self._replace_link_state(link_state)
        return link_state

    async def select(self, display_name: str) -> ActionResult:
        """Handle a tap on the row titled with a provider's display name.

        Raises:
            ProviderNotFound: If no catalog provider has this display name
        """
        provider = self._catalog.by_display_name(display_name)
        return await self.handle_selection(provider)

    async def handle_selection(
        self,
        provider: Provider,
        current_link_state: Optional[ResolvedLinkState] = None
    ) -> ActionResult:
        """Link an unlinked provider or unlink a linked one.

        Args:
            provider: Selected catalog provider
            current_link_state: State the selection was made against. When
                omitted, a fresh snapshot is fetched from the backend. When
                given, it is trusted as-is: a stale row decides the action
                and the backend is left to reject it.

        Returns:
            Typed result; failures never raise across this boundary

        Raises:
            ProviderNotFound: If the provider is not in the catalog
        """
        self._ensure_known(provider)

        if self._in_flight:
            logger.info(f"Ignoring selection of {provider.identifier} for user {self.user_id}: action in flight")
            return ActionResult.ignored(self._current_link_state)

        self._in_flight = True
        try:
            if current_link_state is None:
                try:
                    current_link_state = await self._link_state_query.execute(self.user_id)
                except BackendFailure as e:
                    return ActionResult.failure(e, snapshot=self._current_link_state)

            action = LinkAction.for_selection(provider, current_link_state.is_linked(provider))
            return await self._run(action, current_link_state)
        finally:
            await self._settle()

    async def execute(
        self,
        action: LinkAction,
        current_link_state: Optional[ResolvedLinkState] = None
    ) -> ActionResult:
        """Run an explicit link or unlink action.

        Redundant actions (linking a linked provider, unlinking an unlinked
        one) are rejected before any request is issued.

        Raises:
            ProviderNotFound: If the action's provider is not in the catalog
        """
        self._ensure_known(action.provider)

        if self._in_flight:
            logger.info(f"Ignoring {action} for user {self.user_id}: action in flight")
            return ActionResult.ignored(self._current_link_state)

        self._in_flight = True
        try:
            if current_link_state is None:
                try:
                    current_link_state = await self._link_state_query.execute(self.user_id)
                except BackendFailure as e:
                    return ActionResult.failure(e, action=action, snapshot=self._current_link_state)

            is_linked = current_link_state.is_linked(action.provider)
            if action.is_link and is_linked:
                return await self._reject(action, current_link_state, RedundantLinkAction.already_linked(action.provider.identifier))
            if action.is_unlink and not is_linked:
                return await self._reject(action, current_link_state, RedundantLinkAction.not_linked(action.provider.identifier))

            return await self._run(action, current_link_state)
        finally:
            await self._settle()

    async def _run(self, action: LinkAction, link_state: ResolvedLinkState) -> ActionResult:
        provider = action.provider
        credential = None

        if action.is_link:
            await self._transition(ActionState.CREDENTIAL_PENDING, action)
            try:
                credential = await self._credential_exchange.exchange(provider.identifier)
            except ExchangeCancelled as e:
                logger.info(f"Credential exchange for {provider.identifier} cancelled by user {self.user_id}")
                await self._transition(ActionState.FAILED, action, reason="cancelled")
                return ActionResult.cancelled(e, action=action, snapshot=link_state)
            except CredentialExchangeError as e:
                logger.warning(f"Credential exchange for {provider.identifier} failed: {e.message}")
                await self._transition(ActionState.FAILED, action, reason=e.reason)
                return ActionResult.failure(e, action=action, snapshot=link_state)

        await self._transition(ActionState.REQUEST_IN_FLIGHT, action)
        try:
            if action.is_link:
                await self._backend.link(self.user_id, credential)
            else:
                await self._backend.unlink(self.user_id, provider.identifier)

            refreshed = await self._link_state_query.execute(self.user_id)
        except BackendFailure as e:
            logger.warning(f"Backend failed to {action} for user {self.user_id}: {e.message}")
            await self._transition(ActionState.FAILED, action, reason=e.reason)
            return ActionResult.failure(e, action=action, snapshot=link_state)

        logger.info(f"Completed {action} for user {self.user_id}")
        await self._transition(ActionState.RESOLVED, action)
        await self._replace_link_state(refreshed)
        return ActionResult.success(action, refreshed)

    async def _reject(
        self,
        action: LinkAction,
        link_state: ResolvedLinkState,
        error: RedundantLinkAction
    ) -> ActionResult:
        logger.info(f"Rejected {action} for user {self.user_id}: {error.message}")
        await self._transition(ActionState.FAILED, action, reason="redundant_action")
        return ActionResult.failure(error, action=action, snapshot=link_state)

    async def _settle(self) -> None:
        """Return to idle once a selection has ended, however it ended."""
        try:
            if self._state.is_busy:
                # Only reachable when an unexpected exception escaped mid-flight
                await self._transition(ActionState.FAILED, reason="unexpected_error")
            if self._state.is_terminal:
                await self._transition(ActionState.IDLE)
        finally:
            self._in_flight = False

    async def _transition(
        self,
        target: ActionState,
        action: Optional[LinkAction] = None,
        reason: Optional[str] = None
    ) -> None:
        previous = self._state
        if not previous.can_transition_to(target):
            raise InvalidStateTransition(previous.value, target.value, self.user_id)

        self._state = target
        logger.debug(f"User {self.user_id} selection state: {previous.value} -> {target.value}")

        await self._publish(ActionStateChanged(
            user_id=self.user_id,
            previous_state=previous,
            current_state=target,
            action=action,
            reason=reason
        ))

    async def _replace_link_state(self, link_state: ResolvedLinkState) -> None:
        self._generation += 1
        self._current_link_state = link_state
        await self._publish(LinkStateRefreshed(user_id=self.user_id, link_state=link_state))

    async def _publish(self, event: Any) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception:
            # Observers never change the outcome of a selection
            logger.exception(f"Failed to publish {event.event_type} for user {self.user_id}")

    def _ensure_known(self, provider: Provider) -> None:
        if provider not in self._catalog:
            raise ProviderNotFound.by_identifier(provider.identifier, list(self._catalog.identifiers()))
