"""Base exception for the account linking platform.

All linking exceptions inherit from LinkingError and carry an error code
and a details dictionary for structured logging and result reporting.
"""

from typing import Any, Dict, Optional


class LinkingError(Exception):
    """Base exception for all account linking errors."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging and events."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }
