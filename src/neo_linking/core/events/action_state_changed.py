"""Selection state transition event."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..value_objects import ActionState, LinkAction


@dataclass(frozen=True)
class ActionStateChanged:
    """Event fired on every coordinator state transition.
    
    UI layers subscribe to this to show progress and to trigger refreshes.
    """
    
    user_id: str
    previous_state: ActionState
    current_state: ActionState
    action: Optional[LinkAction] = None
    reason: Optional[str] = None
    
    event_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_source: str = "link_action_coordinator"
    
    @property
    def event_type(self) -> str:
        return "action_state_changed"
    
    @property
    def is_completion(self) -> bool:
        """Check if this transition ends a selection."""
        return self.current_state.is_terminal
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_type': self.event_type,
            'user_id': self.user_id,
            'previous_state': self.previous_state.value,
            'current_state': self.current_state.value,
            'action': str(self.action) if self.action else None,
            'reason': self.reason,
            'event_timestamp': self.event_timestamp.isoformat(),
            'event_source': self.event_source,
        }
    
    def __str__(self) -> str:
        return f"ActionStateChanged({self.user_id}, {self.previous_state.value} -> {self.current_state.value})"
