"""Link state refresh event."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from ..value_objects import ResolvedLinkState


@dataclass(frozen=True)
class LinkStateRefreshed:
    """Event fired when a new link state snapshot replaces the old one."""
    
    user_id: str
    link_state: ResolvedLinkState
    
    event_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_source: str = "link_action_coordinator"
    
    @property
    def event_type(self) -> str:
        return "link_state_refreshed"
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_type': self.event_type,
            'user_id': self.user_id,
            'linked': self.link_state.to_dict(),
            'event_timestamp': self.event_timestamp.isoformat(),
            'event_source': self.event_source,
        }
