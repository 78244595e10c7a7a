"""Tests for the link action coordinator."""

import asyncio

import pytest

from neo_linking.application.commands import LinkActionCoordinator
from neo_linking.application.queries import LinkStateResolver
from neo_linking.core.entities import Provider
from neo_linking.core.events import ActionStateChanged, LinkStateRefreshed
from neo_linking.core.exceptions import (
    BackendFailure,
    ProviderNotFound,
    RedundantLinkAction,
)
from neo_linking.core.value_objects import (
    ActionOutcome,
    ActionState,
    LinkAction,
)


@pytest.fixture
def coordinator(user_id, catalog, backend, credential_exchange, event_bus):
    return LinkActionCoordinator(
        user_id=user_id,
        catalog=catalog,
        backend=backend,
        credential_exchange=credential_exchange,
        event_publisher=event_bus
    )


def transitions(event_bus):
    return [
        (event.previous_state, event.current_state)
        for event in event_bus.events_of(ActionStateChanged)
    ]


class TestRefresh:
    """Test link state refresh."""
    
    @pytest.mark.asyncio
    async def test_refresh_publishes_state(self, coordinator, event_bus):
        state = await coordinator.refresh()
        
        assert state.linked_identifiers() == ("google.com",)
        assert coordinator.current_link_state == state
        assert event_bus.events_of(LinkStateRefreshed)[-1].link_state == state
    
    @pytest.mark.asyncio
    async def test_refresh_failure_keeps_previous_state(self, coordinator, backend):
        previous = await coordinator.refresh()
        backend.failures["current_linked_providers"] = BackendFailure("Network error")
        
        with pytest.raises(BackendFailure):
            await coordinator.refresh()
        
        assert coordinator.current_link_state == previous


class TestUnlink:
    """Test selection of a linked provider."""
    
    @pytest.mark.asyncio
    async def test_selecting_linked_provider_unlinks(self, coordinator, backend, credential_exchange, google, user_id):
        state = await coordinator.refresh()
        
        result = await coordinator.handle_selection(google, state)
        
        assert result.outcome is ActionOutcome.SUCCESS
        assert result.action == LinkAction.unlink(google)
        assert backend.mutating_calls == [("unlink", user_id, "google.com")]
        assert credential_exchange.calls == []
        assert "google.com" not in result.snapshot.linked_identifiers()
        assert coordinator.current_link_state == result.snapshot
    
    @pytest.mark.asyncio
    async def test_unlink_state_sequence(self, coordinator, event_bus, google):
        state = await coordinator.refresh()
        
        await coordinator.handle_selection(google, state)
        
        assert transitions(event_bus) == [
            (ActionState.IDLE, ActionState.REQUEST_IN_FLIGHT),
            (ActionState.REQUEST_IN_FLIGHT, ActionState.RESOLVED),
            (ActionState.RESOLVED, ActionState.IDLE),
        ]
        assert coordinator.state is ActionState.IDLE
    
    @pytest.mark.asyncio
    async def test_backend_failure_leaves_state_unchanged(self, coordinator, backend, catalog, google):
        state = await coordinator.refresh()
        backend.failures["unlink"] = BackendFailure("Network error", reason="network")
        
        result = await coordinator.handle_selection(google, state)
        
        assert result.outcome is ActionOutcome.FAILED
        assert result.display_message == "Network error"
        assert result.snapshot == state
        assert coordinator.current_link_state == state
        assert coordinator.state is ActionState.IDLE
        
        # The remote state is untouched as well
        assert await coordinator.refresh() == state
    
    @pytest.mark.asyncio
    async def test_failure_does_not_publish_refresh(self, coordinator, backend, event_bus, google):
        state = await coordinator.refresh()
        event_bus.clear()
        backend.failures["unlink"] = BackendFailure("Network error")
        
        await coordinator.handle_selection(google, state)
        
        assert event_bus.events_of(LinkStateRefreshed) == []
        assert transitions(event_bus)[-2:] == [
            (ActionState.REQUEST_IN_FLIGHT, ActionState.FAILED),
            (ActionState.FAILED, ActionState.IDLE),
        ]


class TestLink:
    """Test selection of an unlinked provider."""
    
    @pytest.mark.asyncio
    async def test_selecting_unlinked_provider_links(self, coordinator, backend, credential_exchange, twitter, user_id):
        state = await coordinator.refresh()
        
        result = await coordinator.handle_selection(twitter, state)
        
        assert result.is_success
        assert credential_exchange.calls == ["twitter.com"]
        assert backend.mutating_calls == [("link", user_id, "twitter.com")]
        assert result.snapshot.linked_identifiers() == ("google.com", "twitter.com")
    
    @pytest.mark.asyncio
    async def test_link_state_sequence(self, coordinator, event_bus, apple):
        state = await coordinator.refresh()
        
        await coordinator.handle_selection(apple, state)
        
        assert transitions(event_bus) == [
            (ActionState.IDLE, ActionState.CREDENTIAL_PENDING),
            (ActionState.CREDENTIAL_PENDING, ActionState.REQUEST_IN_FLIGHT),
            (ActionState.REQUEST_IN_FLIGHT, ActionState.RESOLVED),
            (ActionState.RESOLVED, ActionState.IDLE),
        ]
    
    @pytest.mark.asyncio
    async def test_cancelled_exchange_makes_no_backend_call(self, coordinator, backend, credential_exchange, twitter):
        state = await coordinator.refresh()
        credential_exchange.cancel("twitter.com")
        
        result = await coordinator.handle_selection(twitter, state)
        
        assert result.outcome is ActionOutcome.CANCELLED
        assert result.display_message is None
        assert backend.mutating_calls == []
        assert result.snapshot == state
        assert coordinator.current_link_state == state
        assert coordinator.state is ActionState.IDLE
    
    @pytest.mark.asyncio
    async def test_exchange_error_is_displayed(self, coordinator, backend, credential_exchange, apple):
        state = await coordinator.refresh()
        credential_exchange.fail("apple.com", "Sign in with Apple failed")
        
        result = await coordinator.handle_selection(apple, state)
        
        assert result.outcome is ActionOutcome.FAILED
        assert result.reason == "handshake_failed"
        assert result.display_message == "Sign in with Apple failed"
        assert backend.mutating_calls == []
    
    @pytest.mark.asyncio
    async def test_credential_in_use_by_other_account(self, coordinator, memory_backend, credential_exchange, twitter):
        memory_backend.add_user("someone-else", {"twitter.com": "shared-subject"})
        credential_exchange.succeed("twitter.com", subject="shared-subject")
        state = await coordinator.refresh()
        
        result = await coordinator.handle_selection(twitter, state)
        
        assert result.is_failure
        assert result.reason == "credential_already_in_use"
        assert result.snapshot == state


class TestSelectionWithoutState:
    """Test selections that fetch the link state first."""
    
    @pytest.mark.asyncio
    async def test_fetches_fresh_state(self, coordinator, backend, google, user_id):
        result = await coordinator.handle_selection(google)
        
        assert result.action == LinkAction.unlink(google)
        assert backend.calls[0] == ("current_linked_providers", user_id)
    
    @pytest.mark.asyncio
    async def test_fetch_failure_returns_failure(self, coordinator, backend, google):
        backend.failures["current_linked_providers"] = BackendFailure("Offline")
        
        result = await coordinator.handle_selection(google)
        
        assert result.is_failure
        assert result.display_message == "Offline"
        assert backend.mutating_calls == []
        assert coordinator.state is ActionState.IDLE
        assert not coordinator.is_busy
    
    @pytest.mark.asyncio
    async def test_select_by_display_name(self, coordinator, backend, user_id):
        result = await coordinator.select("Twitter")
        
        assert result.is_success
        assert backend.mutating_calls == [("link", user_id, "twitter.com")]
    
    @pytest.mark.asyncio
    async def test_select_unknown_display_name_fails_fast(self, coordinator):
        with pytest.raises(ProviderNotFound):
            await coordinator.select("Custom Auth System")
    
    @pytest.mark.asyncio
    async def test_provider_outside_catalog_fails_fast(self, coordinator, backend):
        with pytest.raises(ProviderNotFound):
            await coordinator.handle_selection(Provider("github.com", "GitHub"))
        
        assert backend.calls == []


class TestExplicitActions:
    """Test redundant action guard."""
    
    @pytest.mark.asyncio
    async def test_linking_linked_provider_is_rejected(self, coordinator, backend, credential_exchange, google):
        state = await coordinator.refresh()
        
        result = await coordinator.execute(LinkAction.link(google), state)
        
        assert result.is_failure
        assert isinstance(result.error, RedundantLinkAction)
        assert credential_exchange.calls == []
        assert backend.mutating_calls == []
        assert coordinator.state is ActionState.IDLE
    
    @pytest.mark.asyncio
    async def test_unlinking_unlinked_provider_is_rejected(self, coordinator, backend, apple):
        state = await coordinator.refresh()
        
        result = await coordinator.execute(LinkAction.unlink(apple), state)
        
        assert result.is_failure
        assert result.error.action == "unlink"
        assert backend.mutating_calls == []
    
    @pytest.mark.asyncio
    async def test_stale_action_checked_against_fresh_state(self, coordinator, memory_backend, backend, apple, user_id):
        # Apple was linked elsewhere after the UI last rendered
        memory_backend.add_user(user_id, {"apple.com": "apple-subject"})
        
        result = await coordinator.execute(LinkAction.link(apple))
        
        assert result.is_failure
        assert backend.mutating_calls == []
    
    @pytest.mark.asyncio
    async def test_valid_explicit_action_runs(self, coordinator, backend, google, user_id):
        result = await coordinator.execute(LinkAction.unlink(google))
        
        assert result.is_success
        assert backend.mutating_calls == [("unlink", user_id, "google.com")]


class TestConcurrency:
    """Test that one selection runs at a time."""
    
    @pytest.mark.asyncio
    async def test_second_selection_while_request_in_flight_is_ignored(self, coordinator, backend, google, twitter, user_id):
        state = await coordinator.refresh()
        backend.gate = asyncio.Event()
        
        first = asyncio.create_task(coordinator.handle_selection(google, state))
        await asyncio.sleep(0)
        
        assert coordinator.is_busy
        assert coordinator.state is ActionState.REQUEST_IN_FLIGHT
        
        second = await coordinator.handle_selection(google, state)
        third = await coordinator.handle_selection(twitter, state)
        
        backend.gate.set()
        first_result = await first
        
        assert second.outcome is ActionOutcome.IGNORED
        assert third.outcome is ActionOutcome.IGNORED
        assert first_result.is_success
        assert backend.mutating_calls == [("unlink", user_id, "google.com")]
    
    @pytest.mark.asyncio
    async def test_selection_while_credential_pending_is_ignored(self, coordinator, backend, credential_exchange, twitter):
        state = await coordinator.refresh()
        credential_exchange.gate = asyncio.Event()
        
        first = asyncio.create_task(coordinator.handle_selection(twitter, state))
        await asyncio.sleep(0)
        
        assert coordinator.state is ActionState.CREDENTIAL_PENDING
        
        second = await coordinator.handle_selection(twitter, state)
        
        credential_exchange.gate.set()
        await first
        
        assert second.is_ignored
        assert credential_exchange.calls == ["twitter.com"]
        assert len([call for call in backend.mutating_calls if call[0] == "link"]) == 1
    
    @pytest.mark.asyncio
    async def test_rapid_concurrent_selections_issue_one_request(self, coordinator, backend, google):
        state = await coordinator.refresh()
        backend.gate = asyncio.Event()

        tasks = [
            asyncio.create_task(coordinator.handle_selection(google, state)),
            asyncio.create_task(coordinator.handle_selection(google, state)),
        ]
        await asyncio.sleep(0)
        backend.gate.set()
        results = await asyncio.gather(*tasks)
        
        outcomes = sorted(result.outcome.value for result in results)
        assert outcomes == ["ignored", "success"]
        assert len(backend.mutating_calls) == 1
    
    @pytest.mark.asyncio
    async def test_new_selection_allowed_after_completion(self, coordinator, backend, google):
        state = await coordinator.refresh()
        
        unlinked = await coordinator.handle_selection(google, state)
        relinked = await coordinator.handle_selection(google, unlinked.snapshot)
        
        assert unlinked.is_success
        assert relinked.is_success
        assert relinked.action == LinkAction.link(google)
        assert [call[0] for call in backend.mutating_calls] == ["unlink", "link"]


    @pytest.mark.asyncio
    async def test_refresh_finishing_after_selection_keeps_newer_state(self, coordinator, backend, event_bus, google, user_id):
        state = await coordinator.refresh()
        gate = backend.fetch_gate = asyncio.Event()

        # Refresh reads the pre-unlink snapshot, then stalls
        refresh = asyncio.create_task(coordinator.refresh())
        await asyncio.sleep(0)

        result = await coordinator.handle_selection(google, state)
        gate.set()
        refreshed = await refresh

        assert result.is_success
        assert not coordinator.current_link_state.is_linked(google)
        assert refreshed == result.snapshot
        assert event_bus.events_of(LinkStateRefreshed)[-1].link_state == result.snapshot
        assert await backend.backend.current_linked_providers(user_id) == set()

    @pytest.mark.asyncio
    async def test_refresh_without_overlap_replaces_state(self, coordinator, memory_backend, apple, user_id):
        await coordinator.refresh()
        memory_backend.add_user(user_id, {"apple.com": "apple-subject"})

        state = await coordinator.refresh()

        assert state.is_linked(apple)
        assert coordinator.current_link_state == state


class TestCallerSuppliedState:
    """Test selections made against a state passed in by the caller."""

    @pytest.mark.asyncio
    async def test_supplied_state_is_trusted_without_fetch(self, coordinator, backend, google, user_id):
        state = await coordinator.refresh()
        backend.calls.clear()

        await coordinator.handle_selection(google, state)

        assert backend.calls[0] == ("unlink", user_id, "google.com")

    @pytest.mark.asyncio
    async def test_stale_row_reaches_backend(self, coordinator, backend, catalog, google, user_id):
        # Rendered before google was linked
        stale = LinkStateResolver().resolve(catalog.list(), set())

        result = await coordinator.handle_selection(google, stale)

        assert backend.mutating_calls == [("link", user_id, "google.com")]
        assert result.is_failure
        assert result.reason == "provider_already_linked"
        assert result.snapshot == stale


class TestUnexpectedErrors:
    """Test state recovery when a collaborator raises a non-linking error."""
    
    @pytest.mark.asyncio
    async def test_unexpected_error_propagates_and_resets(self, coordinator, backend, google):
        state = await coordinator.refresh()
        backend.failures["unlink"] = RuntimeError("bug")
        
        with pytest.raises(RuntimeError):
            await coordinator.handle_selection(google, state)
        
        assert coordinator.state is ActionState.IDLE
        assert not coordinator.is_busy
    
    @pytest.mark.asyncio
    async def test_failing_publisher_does_not_change_outcome(self, user_id, catalog, backend, credential_exchange, google):
        class BrokenPublisher:
            async def publish(self, event):
                raise RuntimeError("observer down")
        
        coordinator = LinkActionCoordinator(user_id, catalog, backend, credential_exchange, BrokenPublisher())
        state = await coordinator.refresh()
        
        result = await coordinator.handle_selection(google, state)
        
        assert result.is_success
    
    def test_user_id_required(self, catalog, backend, credential_exchange):
        with pytest.raises(ValueError):
            LinkActionCoordinator("", catalog, backend, credential_exchange)
