"""Selection state machine states."""

from enum import Enum
from typing import Dict, FrozenSet


class ActionState(str, Enum):
    """Per-selection coordinator state."""
    IDLE = "idle"
    CREDENTIAL_PENDING = "credential_pending"
    REQUEST_IN_FLIGHT = "request_in_flight"
    RESOLVED = "resolved"
    FAILED = "failed"
    
    @property
    def is_busy(self) -> bool:
        return self in (ActionState.CREDENTIAL_PENDING, ActionState.REQUEST_IN_FLIGHT)
    
    @property
    def is_terminal(self) -> bool:
        return self in (ActionState.RESOLVED, ActionState.FAILED)
    
    def can_transition_to(self, target: 'ActionState') -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: Dict[ActionState, FrozenSet[ActionState]] = {
    # Unlink skips the credential step; redundant actions fail straight from idle
    ActionState.IDLE: frozenset({
        ActionState.CREDENTIAL_PENDING,
        ActionState.REQUEST_IN_FLIGHT,
        ActionState.FAILED,
    }),
    ActionState.CREDENTIAL_PENDING: frozenset({
        ActionState.REQUEST_IN_FLIGHT,
        ActionState.FAILED,
    }),
    ActionState.REQUEST_IN_FLIGHT: frozenset({
        ActionState.RESOLVED,
        ActionState.FAILED,
    }),
    ActionState.RESOLVED: frozenset({ActionState.IDLE}),
    ActionState.FAILED: frozenset({ActionState.IDLE}),
}
