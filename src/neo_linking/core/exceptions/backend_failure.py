"""Authentication backend failure exception."""

from typing import Any, Dict, Optional
from .base import LinkingError


class BackendFailure(LinkingError):
    """Raised when a link, unlink, sign-in or fetch call fails remotely.
    
    The message is surfaced verbatim to the user. No retry is attempted.
    """
    
    def __init__(
        self,
        message: str = "Authentication backend request failed",
        *,
        reason: Optional[str] = None,
        operation: Optional[str] = None,
        user_id: Optional[str] = None,
        provider_identifier: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.reason = reason or "backend_error"
        self.operation = operation
        self.user_id = user_id
        self.provider_identifier = provider_identifier
        self.context = context or {}
        super().__init__(
            message,
            details={
                "reason": self.reason,
                "operation": operation,
                "user_id": user_id,
                "provider_identifier": provider_identifier,
                **self.context,
            }
        )
    
    def __str__(self) -> str:
        """String representation with operation context."""
        if self.operation:
            return f"{self.message} (operation={self.operation})"
        return self.message
