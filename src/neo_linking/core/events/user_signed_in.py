"""User sign-in event."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from ..entities import Provider


@dataclass(frozen=True)
class UserSignedIn:
    """Event fired when a user signs in with an identity provider.
    
    Hosts use it to move from the provider list to the signed-in view.
    """
    
    user_id: str
    provider: Provider
    
    event_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_source: str = "sign_in_coordinator"
    
    @property
    def event_type(self) -> str:
        return "user_signed_in"
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_type': self.event_type,
            'user_id': self.user_id,
            'provider': self.provider.identifier,
            'event_timestamp': self.event_timestamp.isoformat(),
            'event_source': self.event_source,
        }
    
    def __str__(self) -> str:
        return f"UserSignedIn({self.user_id}, provider={self.provider.identifier})"
