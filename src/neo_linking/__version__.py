"""Version information for neo-account-linking."""

__version__ = "1.0.0"
