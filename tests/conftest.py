"""Pytest configuration and fixtures for neo-account-linking tests."""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from neo_linking.core.entities import APPLE, GOOGLE, TWITTER, ProviderCatalog
from neo_linking.core.exceptions import CredentialExchangeError, ExchangeCancelled
from neo_linking.core.value_objects import Credential
from neo_linking.infrastructure.adapters import InMemoryEventBus
from neo_linking.infrastructure.repositories import InMemoryAuthBackend


TEST_USER_ID = "user-123"


class FakeCredentialExchange:
    """Scriptable implementation of CredentialExchange for testing."""

    def __init__(self):
        self.calls: List[str] = []
        self.outcomes: Dict[str, object] = {}
        self.gate: Optional[asyncio.Event] = None

    def succeed(self, provider_identifier: str, subject: Optional[str] = None) -> Credential:
        credential = Credential(
            provider_identifier,
            id_token=f"id-token-{provider_identifier}",
            provider_user_id=subject or f"{provider_identifier}-subject"
        )
        self.outcomes[provider_identifier] = credential
        return credential

    def cancel(self, provider_identifier: str) -> None:
        self.outcomes[provider_identifier] = ExchangeCancelled(provider_identifier=provider_identifier)

    def fail(self, provider_identifier: str, message: str = "Handshake failed") -> None:
        self.outcomes[provider_identifier] = CredentialExchangeError(
            message,
            provider_identifier=provider_identifier,
            reason="handshake_failed"
        )

    async def exchange(self, provider_identifier: str) -> Credential:
        self.calls.append(provider_identifier)
        if self.gate is not None:
            await self.gate.wait()

        outcome = self.outcomes.get(provider_identifier)
        if outcome is None:
            outcome = self.succeed(provider_identifier)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingBackend:
    """AuthBackend wrapper that records calls and injects failures."""

    def __init__(self, backend: InMemoryAuthBackend):
        self.backend = backend
        self.calls: List[Tuple[str, ...]] = []
        self.failures: Dict[str, Exception] = {}
        self.gate: Optional[asyncio.Event] = None

        # One-shot: holds the next fetch after its snapshot was read
        self.fetch_gate: Optional[asyncio.Event] = None

    @property
    def mutating_calls(self) -> List[Tuple[str, ...]]:
        return [call for call in self.calls if call[0] in ("link", "unlink", "sign_in")]

    async def _enter(self, operation: str) -> None:
        if operation in ("link", "unlink") and self.gate is not None:
            await self.gate.wait()
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    async def link(self, user_id: str, credential: Credential) -> None:
        self.calls.append(("link", user_id, credential.provider_identifier))
        await self._enter("link")
        await self.backend.link(user_id, credential)

    async def unlink(self, user_id: str, provider_identifier: str) -> None:
        self.calls.append(("unlink", user_id, provider_identifier))
        await self._enter("unlink")
        await self.backend.unlink(user_id, provider_identifier)

    async def current_linked_providers(self, user_id: str):
        self.calls.append(("current_linked_providers", user_id))
        await self._enter("current_linked_providers")
        linked = await self.backend.current_linked_providers(user_id)
        gate, self.fetch_gate = self.fetch_gate, None
        if gate is not None:
            await gate.wait()
        return linked

    async def sign_in(self, credential: Credential) -> str:
        self.calls.append(("sign_in", credential.provider_identifier))
        await self._enter("sign_in")
        return await self.backend.sign_in(credential)


@pytest.fixture
def catalog():
    """Default provider catalog: Apple, Google, Twitter."""
    return ProviderCatalog.default()


@pytest.fixture
def apple():
    return APPLE


@pytest.fixture
def google():
    return GOOGLE


@pytest.fixture
def twitter():
    return TWITTER


@pytest.fixture
def memory_backend():
    """In-memory backend with a user linked to Google only."""
    backend = InMemoryAuthBackend()
    backend.add_user(TEST_USER_ID, {"google.com": "google-subject"})
    return backend


@pytest.fixture
def backend(memory_backend):
    """Recording backend wrapping the seeded in-memory backend."""
    return RecordingBackend(memory_backend)


@pytest.fixture
def credential_exchange():
    return FakeCredentialExchange()


@pytest.fixture
def event_bus():
    return InMemoryEventBus(keep_history=True)


@pytest.fixture
def user_id():
    return TEST_USER_ID
