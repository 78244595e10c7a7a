"""Account linking value objects.

Immutable value objects, one concept per file.
"""

from .credential import Credential
from .linked_provider_set import LinkedProviderSet
from .link_state import ProviderLinkState, ResolvedLinkState
from .link_action import LinkAction, LinkActionKind
from .action_result import ActionOutcome, ActionResult, SignInResult
from .section import Item, Section
from .action_state import ActionState, ALLOWED_TRANSITIONS
from .action_state import ActionState, ALLOWED_TRANSITIONS

__all__ = [
    "Credential",
    "LinkedProviderSet",
    "ProviderLinkState",
    "ResolvedLinkState",
    "LinkAction",
    "LinkActionKind",
    "ActionOutcome",
    "ActionResult",
    "SignInResult",
    "Item",
    "Section",
    "ActionState",
    "ALLOWED_TRANSITIONS",
    "ActionState",
    "ALLOWED_TRANSITIONS",
]
