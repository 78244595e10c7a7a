"""Account linking infrastructure repositories."""

from .memory_auth_backend import InMemoryAuthBackend

__all__ = [
    "InMemoryAuthBackend",
]
