"""Account linking queries."""

from .resolve_link_state import LinkStateResolver, ResolveLinkState
from .build_sections import build_provider_sections, build_link_sections

__all__ = [
    "LinkStateResolver",
    "ResolveLinkState",
    "build_provider_sections",
    "build_link_sections",
]
