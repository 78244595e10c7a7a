"""Identity provider entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Provider:
    """External identity provider a user can sign in with or link.
    
    Handles ONLY provider identity and display metadata.
    The identifier is the stable key used by the authentication backend
    (e.g. "apple.com"); the display name is what list rows show.
    """
    
    identifier: str
    display_name: str
    
    def __post_init__(self) -> None:
        """Validate provider fields."""
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise ValueError("Provider identifier cannot be empty")
        
        if not isinstance(self.display_name, str) or not self.display_name.strip():
            raise ValueError("Provider display name cannot be empty")
    
    @property
    def id(self) -> str:
        """Shorthand for the provider identifier."""
        return self.identifier
    
    def __str__(self) -> str:
        return self.display_name
