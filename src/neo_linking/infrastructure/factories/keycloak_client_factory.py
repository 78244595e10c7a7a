"""Keycloak client factory for account linking."""

import logging
from typing import Any, Dict, Optional

from ...core.exceptions import BackendFailure
from ..adapters import KeycloakLinkAdapter

logger = logging.getLogger(__name__)


class KeycloakClientFactory:
    """Keycloak client factory following maximum separation principle.
    
    Handles ONLY Keycloak client instantiation and configuration.
    Does not handle linking logic or credential exchange.
    """
    
    def __init__(self, keycloak_config: Dict[str, Any]):
        """Initialize Keycloak client factory.
        
        Args:
            keycloak_config: Keycloak configuration dictionary
        """
        if not keycloak_config:
            raise ValueError("Keycloak configuration is required")
        
        self.config = keycloak_config
        self._validate_config()
    
    def _validate_config(self) -> None:
        """Validate Keycloak configuration.
        
        Raises:
            ValueError: If configuration is invalid
        """
        for field in ("server_url", "realm_name", "client_id"):
            if not self.config.get(field):
                raise ValueError(f"Missing required Keycloak config field: {field}")
        
        if not self.config["server_url"].startswith(("http://", "https://")):
            raise ValueError("Invalid Keycloak server URL format")
        
        logger.debug("Keycloak configuration validated successfully")
    
    def _normalize_server_url(self, server_url: str) -> str:
        """Normalize Keycloak server URL for v18+ compatibility."""
        server_url = server_url.rstrip('/')
        
        # Keycloak v18+ no longer serves under /auth
        if server_url.endswith('/auth'):
            server_url = server_url[:-5]
            logger.debug(f"Removed /auth suffix for Keycloak v18+ compatibility: {server_url}")
        
        return server_url
    
    async def create_openid_client(self, realm_name: Optional[str] = None):
        """Create Keycloak OpenID Connect client.
        
        Raises:
            BackendFailure: If client creation fails
        """
        realm_name = realm_name or self.config["realm_name"]
        try:
            logger.debug(f"Creating Keycloak OpenID client for realm: {realm_name}")
            
            from keycloak import KeycloakOpenID
            
            return KeycloakOpenID(
                server_url=self._normalize_server_url(self.config["server_url"]),
                client_id=self.config["client_id"],
                realm_name=realm_name,
                client_secret_key=self.config.get("client_secret"),
                verify=self.config.get("verify_ssl", True),
            )
            
        except Exception as e:
            logger.error(f"Failed to create Keycloak OpenID client for realm {realm_name}: {e}")
            raise BackendFailure(
                "Keycloak OpenID client creation failed",
                reason="client_creation_failed",
                context={"realm_name": realm_name, "error": str(e)}
            )
    
    async def create_admin_client(self, realm_name: Optional[str] = None):
        """Create Keycloak Admin API client.
        
        Uses username/password when both are configured, client
        credentials otherwise.
        
        Raises:
            BackendFailure: If client creation fails
        """
        realm_name = realm_name or self.config["realm_name"]
        try:
            logger.debug(f"Creating Keycloak Admin client for realm: {realm_name}")
            
            from keycloak import KeycloakAdmin
            
            config = {
                "server_url": self._normalize_server_url(self.config["server_url"]),
                "realm_name": realm_name,
                "verify": self.config.get("verify_ssl", True),
            }
            
            if self.config.get("admin_username") and self.config.get("admin_password"):
                config.update({
                    "username": self.config["admin_username"],
                    "password": self.config["admin_password"],
                    "client_id": self.config.get("admin_client_id", "admin-cli"),
                })
            else:
                config.update({
                    "client_id": self.config.get("admin_client_id", self.config["client_id"]),
                    "client_secret_key": self.config.get("admin_client_secret"),
                })
            
            return KeycloakAdmin(**config)
            
        except Exception as e:
            logger.error(f"Failed to create Keycloak Admin client for realm {realm_name}: {e}")
            raise BackendFailure(
                "Keycloak Admin client creation failed",
                reason="admin_client_creation_failed",
                context={"realm_name": realm_name, "error": str(e)}
            )
    
    async def create_link_adapter(
        self,
        provider_aliases: Optional[Dict[str, str]] = None
    ) -> KeycloakLinkAdapter:
        """Create the Keycloak linking backend with both clients."""
        admin_client = await self.create_admin_client()
        openid_client = await self.create_openid_client()
        
        logger.debug(f"Created Keycloak link adapter for realm: {self.config['realm_name']}")
        return KeycloakLinkAdapter(admin_client, openid_client, provider_aliases)
