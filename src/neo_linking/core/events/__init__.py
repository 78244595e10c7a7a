"""Account linking lifecycle events."""

from .action_state_changed import ActionStateChanged
from .link_state_refreshed import LinkStateRefreshed
from .user_signed_in import UserSignedIn

__all__ = [
    "ActionStateChanged",
    "LinkStateRefreshed",
    "UserSignedIn",
]
