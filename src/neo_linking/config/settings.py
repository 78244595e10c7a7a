"""
Configuration settings for the account linking platform.

Values come from environment variables prefixed with ``LINKING_`` or from
a ``.env`` file.
"""
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LinkingSettings(BaseSettings):
    """Account linking settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="LINKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Application
    app_name: str = Field(default="neo-account-linking")
    environment: str = Field(default="development")
    
    # Keycloak
    keycloak_server_url: str = Field(default="http://localhost:8080")
    keycloak_realm: str = Field(default="master")
    keycloak_client_id: str = Field(default="account-linking")
    keycloak_client_secret: Optional[SecretStr] = Field(default=None)
    keycloak_admin_client_id: str = Field(default="admin-cli")
    keycloak_admin_username: Optional[str] = Field(default=None)
    keycloak_admin_password: Optional[SecretStr] = Field(default=None)
    keycloak_admin_client_secret: Optional[SecretStr] = Field(default=None)
    keycloak_verify_ssl: bool = Field(default=True)
    
    # Provider identifier -> Keycloak identity provider alias
    provider_aliases: Dict[str, str] = Field(default_factory=lambda: {
        "apple.com": "apple",
        "google.com": "google",
        "twitter.com": "twitter",
    })
    
    # Seconds to wait for a provider prompt; None waits until the user acts
    credential_exchange_timeout: Optional[float] = Field(default=None)
    
    # Logging
    log_level: str = Field(default="INFO")
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")
    
    @field_validator("keycloak_server_url")
    @classmethod
    def validate_server_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Invalid Keycloak server URL format")
        return value.rstrip("/")
    
    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("simple", "detailed", "json"):
            raise ValueError("Log format must be one of: simple, detailed, json")
        return value
    
    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"
    
    def keycloak_config(self) -> Dict[str, Any]:
        """Keycloak configuration dictionary for client factories."""
        return {
            "server_url": self.keycloak_server_url,
            "realm_name": self.keycloak_realm,
            "client_id": self.keycloak_client_id,
            "client_secret": self._secret(self.keycloak_client_secret),
            "admin_client_id": self.keycloak_admin_client_id,
            "admin_username": self.keycloak_admin_username,
            "admin_password": self._secret(self.keycloak_admin_password),
            "admin_client_secret": self._secret(self.keycloak_admin_client_secret),
            "verify_ssl": self.keycloak_verify_ssl,
        }
    
    @staticmethod
    def _secret(value: Optional[SecretStr]) -> Optional[str]:
        return value.get_secret_value() if value else None


@lru_cache()
def get_settings() -> LinkingSettings:
    """Get cached settings instance."""
    return LinkingSettings()
