"""Link action value object."""

from dataclasses import dataclass
from enum import Enum

from ..entities import Provider


class LinkActionKind(str, Enum):
    """Kind of change requested against the account."""
    LINK = "link"
    UNLINK = "unlink"


@dataclass(frozen=True)
class LinkAction:
    """Link or unlink request for a single provider."""
    
    kind: LinkActionKind
    provider: Provider
    
    @classmethod
    def link(cls, provider: Provider) -> 'LinkAction':
        return cls(LinkActionKind.LINK, provider)
    
    @classmethod
    def unlink(cls, provider: Provider) -> 'LinkAction':
        return cls(LinkActionKind.UNLINK, provider)
    
    @classmethod
    def for_selection(cls, provider: Provider, is_linked: bool) -> 'LinkAction':
        """Derive the action from the provider's current membership.
        
        A linked provider is unlinked on selection, an unlinked one is linked.
        """
        return cls.unlink(provider) if is_linked else cls.link(provider)
    
    @property
    def is_link(self) -> bool:
        return self.kind is LinkActionKind.LINK
    
    @property
    def is_unlink(self) -> bool:
        return self.kind is LinkActionKind.UNLINK
    
    def __str__(self) -> str:
        return f"{self.kind.value}({self.provider.identifier})"
