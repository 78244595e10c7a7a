"""Link state guard exceptions."""

from typing import Optional
from .base import LinkingError


class RedundantLinkAction(LinkingError):
    """Raised when an action would not change the account's link state.
    
    Linking an already linked provider and unlinking an unlinked one are
    both rejected locally, before any request reaches the backend.
    """
    
    def __init__(
        self,
        message: str,
        *,
        provider_identifier: str,
        action: str
    ) -> None:
        self.provider_identifier = provider_identifier
        self.action = action
        super().__init__(
            message,
            details={"provider_identifier": provider_identifier, "action": action}
        )
    
    @classmethod
    def already_linked(cls, provider_identifier: str) -> 'RedundantLinkAction':
        return cls(
            f"Provider '{provider_identifier}' is already linked to this account",
            provider_identifier=provider_identifier,
            action="link"
        )
    
    @classmethod
    def not_linked(cls, provider_identifier: str) -> 'RedundantLinkAction':
        return cls(
            f"Provider '{provider_identifier}' is not linked to this account",
            provider_identifier=provider_identifier,
            action="unlink"
        )


class InvalidStateTransition(LinkingError):
    """Raised when a coordinator attempts an illegal state transition."""
    
    def __init__(self, current: str, target: str, user_id: Optional[str] = None) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot transition from {current} to {target}",
            details={"current": current, "target": target, "user_id": user_id}
        )
