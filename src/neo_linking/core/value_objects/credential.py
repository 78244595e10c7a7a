"""Provider credential value object."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Credential:
    """Opaque proof of identity issued by a provider's sign-in handshake.
    
    Handles ONLY carrying handshake output to the authentication backend.
    The linking core never inspects tokens; backends consume them.
    """
    
    provider_identifier: str
    id_token: Optional[str] = None
    access_token: Optional[str] = None
    raw_nonce: Optional[str] = None
    
    # Federated identity hints used by backends that record links explicitly
    provider_user_id: Optional[str] = None
    provider_username: Optional[str] = None
    
    extra: Dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self) -> None:
        """Validate credential contents."""
        if not self.provider_identifier:
            raise ValueError("Credential provider identifier cannot be empty")
        
        if not self.id_token and not self.access_token:
            raise ValueError("Credential requires an ID token or an access token")
    
    @property
    def subject_token(self) -> str:
        """Token presented to the backend, preferring the ID token."""
        return self.id_token or self.access_token
    
    def __repr__(self) -> str:
        """Debug representation without token material."""
        return (
            f"Credential(provider_identifier='{self.provider_identifier}', "
            f"provider_user_id={self.provider_user_id!r})"
        )
