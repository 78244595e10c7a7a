"""Tests for component factories."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from neo_linking.application.services import CredentialExchangeRouter
from neo_linking.config import LinkingSettings
from neo_linking.infrastructure.adapters import InMemoryEventBus, KeycloakLinkAdapter
from neo_linking.infrastructure.factories import KeycloakClientFactory, LinkingFactory


@pytest.fixture
def keycloak_config():
    return {
        "server_url": "https://auth.example.com/auth/",
        "realm_name": "customers",
        "client_id": "account-linking",
        "client_secret": "client-secret",
    }


class TestLinkingFactory:
    """Test coordinator ownership."""
    
    @pytest.fixture
    def factory(self, memory_backend, credential_exchange):
        return LinkingFactory(memory_backend, credential_exchange)
    
    def test_defaults(self, factory):
        assert factory.catalog.identifiers() == ("apple.com", "google.com", "twitter.com")
        assert isinstance(factory.event_publisher, InMemoryEventBus)
    
    def test_one_coordinator_per_user(self, factory):
        first = factory.coordinator_for("user-123")
        
        assert factory.coordinator_for("user-123") is first
        assert factory.coordinator_for("user-456") is not first
    
    def test_release(self, factory):
        first = factory.coordinator_for("user-123")
        
        factory.release("user-123")
        factory.release("user-123")
        
        assert factory.coordinator_for("user-123") is not first
    
    def test_sign_in_coordinator_is_shared(self, factory):
        assert factory.sign_in_coordinator() is factory.sign_in_coordinator()
    
    @pytest.mark.asyncio
    async def test_coordinator_runs_against_backend(self, factory):
        result = await factory.coordinator_for("user-123").select("Google")
        
        assert result.is_success
        assert result.snapshot.linked_identifiers() == ()
    
    @pytest.mark.asyncio
    async def test_callback_router_is_shared_between_users(self, catalog, memory_backend):
        router = LinkingFactory.callback_router(catalog)
        factory = LinkingFactory(memory_backend, router, catalog)
        memory_backend.add_user("user-456")
        
        first = asyncio.create_task(factory.coordinator_for("user-123").select("Twitter"))
        await asyncio.sleep(0)
        
        second = await factory.coordinator_for("user-456").select("Twitter")
        
        assert second.is_failure
        assert second.reason == "exchange_in_progress"
        
        router.exchange_for("twitter.com").cancel("twitter.com")
        assert (await first).is_cancelled
    
    def test_callback_router(self, catalog):
        router = LinkingFactory.callback_router(catalog, 30.0)
        
        assert isinstance(router, CredentialExchangeRouter)
        assert all(router.supports(identifier) for identifier in catalog.identifiers())
    
    @pytest.mark.asyncio
    async def test_from_settings(self, monkeypatch, memory_backend):
        create_link_adapter = AsyncMock(return_value=memory_backend)
        monkeypatch.setattr(KeycloakClientFactory, "create_link_adapter", create_link_adapter)
        settings = LinkingSettings(_env_file=None, provider_aliases={"google.com": "google"})
        
        factory = await LinkingFactory.from_settings(settings)
        
        assert factory.backend is memory_backend
        assert isinstance(factory.credential_exchange, CredentialExchangeRouter)
        create_link_adapter.assert_awaited_once_with({"google.com": "google"})


class TestKeycloakClientFactory:
    """Test Keycloak client configuration."""
    
    def test_requires_config(self):
        with pytest.raises(ValueError):
            KeycloakClientFactory({})
    
    @pytest.mark.parametrize("field", ["server_url", "realm_name", "client_id"])
    def test_missing_field(self, keycloak_config, field):
        del keycloak_config[field]
        
        with pytest.raises(ValueError):
            KeycloakClientFactory(keycloak_config)
    
    def test_invalid_server_url(self, keycloak_config):
        keycloak_config["server_url"] = "auth.example.com"
        
        with pytest.raises(ValueError):
            KeycloakClientFactory(keycloak_config)
    
    def test_normalize_server_url(self, keycloak_config):
        factory = KeycloakClientFactory(keycloak_config)
        
        assert factory._normalize_server_url("https://auth.example.com/auth/") == "https://auth.example.com"
        assert factory._normalize_server_url("https://auth.example.com") == "https://auth.example.com"
    
    @pytest.mark.asyncio
    async def test_create_openid_client(self, keycloak_config):
        from keycloak import KeycloakOpenID
        
        client = await KeycloakClientFactory(keycloak_config).create_openid_client()
        
        assert isinstance(client, KeycloakOpenID)
        assert client.realm_name == "customers"
        assert client.client_id == "account-linking"
    
    @pytest.mark.asyncio
    async def test_create_link_adapter(self, monkeypatch, keycloak_config):
        admin_client, openid_client = object(), object()
        monkeypatch.setattr(KeycloakClientFactory, "create_admin_client", AsyncMock(return_value=admin_client))
        monkeypatch.setattr(KeycloakClientFactory, "create_openid_client", AsyncMock(return_value=openid_client))
        
        adapter = await KeycloakClientFactory(keycloak_config).create_link_adapter({"apple.com": "siwa"})
        
        assert isinstance(adapter, KeycloakLinkAdapter)
        assert adapter.keycloak_admin_client is admin_client
        assert adapter.keycloak_openid_client is openid_client
        assert adapter.alias_for("apple.com") == "siwa"
