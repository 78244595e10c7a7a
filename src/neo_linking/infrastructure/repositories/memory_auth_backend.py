"""In-memory authentication backend for account linking."""

import asyncio
import logging
from typing import Dict, Iterable, Optional, Set, Tuple
from uuid import uuid4

from ...core.exceptions import BackendFailure
from ...core.value_objects import Credential

logger = logging.getLogger(__name__)


class InMemoryAuthBackend:
    """Memory-based authentication backend following maximum separation principle.

    Handles ONLY federated identity bookkeeping in process memory.
    Suitable for local development, demos and tests; state is lost on exit.

    Features:
    - Sign-in creates a user on first use of a provider identity
    - One provider identity can belong to one user only
    - Operations serialized with an asyncio lock
    """

    def __init__(self, latency_seconds: float = 0.0):
        """Initialize in-memory backend.

        Args:
            latency_seconds: Artificial delay per call, for exercising UI states
        """
        if latency_seconds < 0:
            raise ValueError("Latency cannot be negative")

        self.latency_seconds = latency_seconds

        # user_id -> provider_identifier -> provider subject
        self._links: Dict[str, Dict[str, str]] = {}

        # (provider_identifier, provider subject) -> user_id
        self._identities: Dict[Tuple[str, str], str] = {}

        self._lock = asyncio.Lock()

    def add_user(self, user_id: Optional[str] = None, providers: Optional[Dict[str, str]] = None) -> str:
        """Seed a user, optionally with provider identities already linked.

        Args:
            user_id: User ID to create (generated if omitted)
            providers: provider_identifier -> provider subject

        Returns:
            The user ID
        """
        user_id = user_id or str(uuid4())
        self._links.setdefault(user_id, {})

        for provider_identifier, subject in (providers or {}).items():
            self._links[user_id][provider_identifier] = subject
            self._identities[(provider_identifier, subject)] = user_id

        return user_id

    async def link(self, user_id: str, credential: Credential) -> None:
        """Link the credential's provider identity to the user.

        Raises:
            BackendFailure: If the user is unknown, the provider is already
                linked, or the identity belongs to another account
        """
        await self._simulate_latency()
        provider_identifier = credential.provider_identifier
        subject = self._subject_for(credential)

        async with self._lock:
            links = self._require_user(user_id, "link")

            if provider_identifier in links:
                raise BackendFailure(
                    "User has already been linked to the given provider.",
                    reason="provider_already_linked",
                    operation="link",
                    user_id=user_id,
                    provider_identifier=provider_identifier
                )

            owner = self._identities.get((provider_identifier, subject))
            if owner is not None and owner != user_id:
                raise BackendFailure(
                    "This credential is already associated with a different user account.",
                    reason="credential_already_in_use",
                    operation="link",
                    user_id=user_id,
                    provider_identifier=provider_identifier
                )

            links[provider_identifier] = subject
            self._identities[(provider_identifier, subject)] = user_id

        logger.debug(f"Linked {provider_identifier} to user {user_id}")

    async def unlink(self, user_id: str, provider_identifier: str) -> None:
        """Remove a provider identity from the user.

        Raises:
            BackendFailure: If the user is unknown or the provider is not linked
        """
        await self._simulate_latency()

        async with self._lock:
            links = self._require_user(user_id, "unlink")

            subject = links.pop(provider_identifier, None)
            if subject is None:
                raise BackendFailure(
                    "User was not linked to an account with the given provider.",
                    reason="no_such_provider",
                    operation="unlink",
                    user_id=user_id,
                    provider_identifier=provider_identifier
                )

            self._identities.pop((provider_identifier, subject), None)

        logger.debug(f"Unlinked {provider_identifier} from user {user_id}")

    async def current_linked_providers(self, user_id: str) -> Set[str]:
        """Get the identifiers of providers linked to the user.

        Raises:
            BackendFailure: If the user is unknown
        """
        await self._simulate_latency()

        async with self._lock:
            return set(self._require_user(user_id, "current_linked_providers"))

    async def sign_in(self, credential: Credential) -> str:
        """Sign in with a provider identity, creating the user on first use."""
        await self._simulate_latency()
        key = (credential.provider_identifier, self._subject_for(credential))

        async with self._lock:
            user_id = self._identities.get(key)
            if user_id is None:
                user_id = str(uuid4())
                self._links[user_id] = {key[0]: key[1]}
                self._identities[key] = user_id
                logger.info(f"Created user {user_id} from {key[0]} sign-in")

        return user_id

    def users(self) -> Iterable[str]:
        return tuple(self._links)

    def _require_user(self, user_id: str, operation: str) -> Dict[str, str]:
        links = self._links.get(user_id)
        if links is None:
            raise BackendFailure(
                "There is no user record corresponding to this identifier.",
                reason="user_not_found",
                operation=operation,
                user_id=user_id
            )
        return links

    @staticmethod
    def _subject_for(credential: Credential) -> str:
        return credential.provider_user_id or credential.subject_token

    async def _simulate_latency(self) -> None:
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
