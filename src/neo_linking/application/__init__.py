"""Account linking application layer.

Use cases built on the core contracts:
- queries: link state resolution and list section building
- commands: provider selection for linking and for sign-in
- services: per-provider credential exchange routing
"""

from .queries import (
    LinkStateResolver,
    ResolveLinkState,
    build_provider_sections,
    build_link_sections,
)
from .commands import LinkActionCoordinator, SignInCoordinator
from .services import CredentialExchangeRouter

__all__ = [
    "LinkStateResolver",
    "ResolveLinkState",
    "build_provider_sections",
    "build_link_sections",
    "LinkActionCoordinator",
    "SignInCoordinator",
    "CredentialExchangeRouter",
]
