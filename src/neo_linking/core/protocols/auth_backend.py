"""Authentication backend protocol contract."""

from typing import Iterable, Protocol, runtime_checkable
from ..value_objects import Credential


@runtime_checkable
class AuthBackend(Protocol):
    """Protocol for the remote authentication service.
    
    Defines ONLY the contract for provider link operations.
    The backend is the source of truth for a user's linked providers.
    All methods raise BackendFailure on error.
    """
    
    async def link(self, user_id: str, credential: Credential) -> None:
        """Associate the credential's provider with the user account."""
        ...
    
    async def unlink(self, user_id: str, provider_identifier: str) -> None:
        """Remove a provider association from the user account."""
        ...
    
    async def current_linked_providers(self, user_id: str) -> Iterable[str]:
        """Get identifiers of the providers currently linked to the user."""
        ...
    
    async def sign_in(self, credential: Credential) -> str:
        """Sign in with a provider credential and return the user ID."""
        ...
