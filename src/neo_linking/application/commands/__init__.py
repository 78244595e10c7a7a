"""Account linking commands."""

from .handle_selection import LinkActionCoordinator
from .sign_in_with_provider import SignInCoordinator

__all__ = [
    "LinkActionCoordinator",
    "SignInCoordinator",
]
