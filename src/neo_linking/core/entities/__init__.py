"""Account linking domain entities."""

from .provider import Provider
from .provider_catalog import ProviderCatalog, APPLE, GOOGLE, TWITTER

__all__ = [
    "Provider",
    "ProviderCatalog",
    "APPLE",
    "GOOGLE",
    "TWITTER",
]
