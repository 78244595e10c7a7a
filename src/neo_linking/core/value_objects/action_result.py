"""Action result value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..entities import Provider
from ..exceptions import LinkingError
from .link_action import LinkAction
from .link_state import ResolvedLinkState


class ActionOutcome(str, Enum):
    """How a user selection ended."""
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"  # User dismissed the provider prompt
    IGNORED = "ignored"  # Another action was already in flight


SILENT_OUTCOMES = frozenset({ActionOutcome.CANCELLED, ActionOutcome.IGNORED})


@dataclass(frozen=True)
class ActionResult:
    """Result of a link or unlink selection.
    
    On success the snapshot is the freshly re-fetched state. On any other
    outcome it is the state as it was before the attempt.
    """
    
    outcome: ActionOutcome
    action: Optional[LinkAction] = None
    snapshot: Optional[ResolvedLinkState] = None
    reason: Optional[str] = None
    error: Optional[LinkingError] = None
    
    @classmethod
    def success(cls, action: LinkAction, snapshot: ResolvedLinkState) -> 'ActionResult':
        return cls(ActionOutcome.SUCCESS, action=action, snapshot=snapshot)
    
    @classmethod
    def failure(
        cls,
        error: LinkingError,
        *,
        action: Optional[LinkAction] = None,
        snapshot: Optional[ResolvedLinkState] = None
    ) -> 'ActionResult':
        return cls(
            ActionOutcome.FAILED,
            action=action,
            snapshot=snapshot,
            reason=getattr(error, "reason", None) or error.error_code,
            error=error
        )
    
    @classmethod
    def cancelled(
        cls,
        error: LinkingError,
        *,
        action: Optional[LinkAction] = None,
        snapshot: Optional[ResolvedLinkState] = None
    ) -> 'ActionResult':
        return cls(
            ActionOutcome.CANCELLED,
            action=action,
            snapshot=snapshot,
            reason="cancelled",
            error=error
        )
    
    @classmethod
    def ignored(cls, snapshot: Optional[ResolvedLinkState] = None) -> 'ActionResult':
        return cls(ActionOutcome.IGNORED, snapshot=snapshot, reason="action_in_flight")
    
    @property
    def is_success(self) -> bool:
        return self.outcome is ActionOutcome.SUCCESS
    
    @property
    def is_failure(self) -> bool:
        return self.outcome is ActionOutcome.FAILED
    
    @property
    def is_cancelled(self) -> bool:
        return self.outcome is ActionOutcome.CANCELLED
    
    @property
    def is_ignored(self) -> bool:
        return self.outcome is ActionOutcome.IGNORED
    
    @property
    def display_message(self) -> Optional[str]:
        """Message to show the user, None for silent outcomes."""
        if self.outcome in SILENT_OUTCOMES or self.error is None:
            return None
        return self.error.message
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "action": str(self.action) if self.action else None,
            "linked": self.snapshot.to_dict() if self.snapshot else None,
            "reason": self.reason,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class SignInResult:
    """Result of signing in with a provider."""
    
    outcome: ActionOutcome
    provider: Optional[Provider] = None
    user_id: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[LinkingError] = None
    
    @property
    def is_success(self) -> bool:
        return self.outcome is ActionOutcome.SUCCESS
    
    @property
    def display_message(self) -> Optional[str]:
        if self.outcome in SILENT_OUTCOMES or self.error is None:
            return None
        return self.error.message
