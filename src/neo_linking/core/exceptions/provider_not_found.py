"""Provider lookup failure exception."""

from typing import List, Optional
from .base import LinkingError


class ProviderNotFound(LinkingError):
    """Raised when a provider is not registered in the catalog.
    
    Lookups happen against a fixed, compile-time catalog, so this always
    indicates a programming error in the caller.
    """
    
    def __init__(
        self,
        message: str = "Provider not found",
        *,
        identifier: Optional[str] = None,
        display_name: Optional[str] = None,
        available: Optional[List[str]] = None
    ) -> None:
        self.identifier = identifier
        self.display_name = display_name
        self.available = available or []
        
        super().__init__(
            message,
            details={
                "identifier": identifier,
                "display_name": display_name,
                "available": self.available,
            }
        )
    
    @classmethod
    def by_identifier(
        cls,
        identifier: str,
        available: Optional[List[str]] = None
    ) -> 'ProviderNotFound':
        """Create exception for an unknown provider identifier."""
        message = f"Provider with identifier '{identifier}' not found"
        if available:
            message += f". Available providers: {', '.join(available)}"
        return cls(message, identifier=identifier, available=available)
    
    @classmethod
    def by_display_name(
        cls,
        display_name: str,
        available: Optional[List[str]] = None
    ) -> 'ProviderNotFound':
        """Create exception for an unknown provider display name."""
        message = f"Provider named '{display_name}' not found"
        if available:
            message += f". Available providers: {', '.join(available)}"
        return cls(message, display_name=display_name, available=available)
