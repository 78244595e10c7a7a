"""Keycloak federated identity adapter for account linking."""

import logging
from typing import Any, Dict, List, Optional, Set

from jose import jwt
from jose.exceptions import JWTError

from ...core.exceptions import BackendFailure
from ...core.value_objects import Credential

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "urn:ietf:params:oauth:token-type:access_token"
ID_TOKEN_TYPE = "urn:ietf:params:oauth:token-type:id_token"

DEFAULT_PROVIDER_ALIASES: Dict[str, str] = {
    "apple.com": "apple",
    "google.com": "google",
    "twitter.com": "twitter",
}


class KeycloakLinkAdapter:
    """Keycloak adapter implementing the linking backend contract.

    Handles ONLY Keycloak federated identity operations:
    - linked providers are the user's federated identities (social logins)
    - link/unlink add or delete a federated identity via the Admin API
    - sign-in is an external-to-internal token exchange via OpenID Connect

    Provider identifiers ("google.com") map to Keycloak identity provider
    aliases ("google"). Aliases without a mapping are reported as-is.
    """

    def __init__(
        self,
        keycloak_admin_client,
        keycloak_openid_client=None,
        provider_aliases: Optional[Dict[str, str]] = None
    ):
        """Initialize Keycloak link adapter.

        Args:
            keycloak_admin_client: Keycloak Admin client instance
            keycloak_openid_client: Keycloak OpenID client, required for sign-in
            provider_aliases: provider identifier -> Keycloak identity provider alias
        """
        if not keycloak_admin_client:
            raise ValueError("Keycloak Admin client is required")

        self.keycloak_admin_client = keycloak_admin_client
        self.keycloak_openid_client = keycloak_openid_client
        self.provider_aliases = dict(provider_aliases or DEFAULT_PROVIDER_ALIASES)
        self._identifiers_by_alias = {alias: identifier for identifier, alias in self.provider_aliases.items()}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    def alias_for(self, provider_identifier: str) -> str:
        return self.provider_aliases.get(provider_identifier, provider_identifier)

    def identifier_for(self, alias: str) -> str:
        return self._identifiers_by_alias.get(alias, alias)

    async def current_linked_providers(self, user_id: str) -> Set[str]:
        """Get provider identifiers of the user's federated identities.

        Raises:
            BackendFailure: If the Admin API call fails
        """
        try:
            logger.debug(f"Getting federated identities for user: {user_id}")

            identities: List[Dict[str, Any]] = await self.keycloak_admin_client.a_get_user_social_logins(user_id)

            return {
                self.identifier_for(identity["identityProvider"])
                for identity in identities or []
                if identity.get("identityProvider")
            }

        except Exception as e:
            logger.error(f"Failed to get federated identities for user {user_id}: {e}")
            raise BackendFailure(
                "Could not load linked providers",
                reason="keycloak_admin_error",
                operation="current_linked_providers",
                user_id=user_id,
                context={"error": str(e)}
            )

    async def link(self, user_id: str, credential: Credential) -> None:
        """Add a federated identity for the credential's provider.

        Raises:
            BackendFailure: If the identity cannot be determined or added
        """
        provider_identifier = credential.provider_identifier
        alias = self.alias_for(provider_identifier)
        provider_user_id, provider_username = self._federated_identity(credential)

        try:
            logger.info(f"Linking {alias} identity to user: {user_id}")

            await self.keycloak_admin_client.a_add_user_social_login(
                user_id,
                alias,
                provider_user_id,
                provider_username
            )

            logger.info(f"Successfully linked {alias} identity to user: {user_id}")

        except Exception as e:
            logger.error(f"Failed to link {alias} identity to user {user_id}: {e}")
            raise BackendFailure(
                self._describe(e, "Provider link failed"),
                reason=self._reason(e, conflict="credential_already_in_use"),
                operation="link",
                user_id=user_id,
                provider_identifier=provider_identifier,
                context={"alias": alias, "error": str(e)}
            )

    async def unlink(self, user_id: str, provider_identifier: str) -> None:
        """Delete the federated identity for a provider.

        Raises:
            BackendFailure: If the identity cannot be removed
        """
        alias = self.alias_for(provider_identifier)

        try:
            logger.info(f"Unlinking {alias} identity from user: {user_id}")

            await self.keycloak_admin_client.a_delete_user_social_login(user_id, alias)

            logger.info(f"Successfully unlinked {alias} identity from user: {user_id}")

        except Exception as e:
            logger.error(f"Failed to unlink {alias} identity from user {user_id}: {e}")
            raise BackendFailure(
                self._describe(e, "Provider unlink failed"),
                reason=self._reason(e, not_found="no_such_provider"),
                operation="unlink",
                user_id=user_id,
                provider_identifier=provider_identifier,
                context={"alias": alias, "error": str(e)}
            )

    async def sign_in(self, credential: Credential) -> str:
        """Exchange a provider token for a Keycloak token and return its subject.

        Raises:
            BackendFailure: If no OpenID client is configured or the exchange fails
        """
        if self.keycloak_openid_client is None:
            raise BackendFailure(
                "Sign-in requires a Keycloak OpenID client",
                reason="sign_in_not_configured",
                operation="sign_in",
                provider_identifier=credential.provider_identifier
            )

        alias = self.alias_for(credential.provider_identifier)

        try:
            logger.info(f"Exchanging {alias} token via Keycloak OpenID")

            token_data = await self.keycloak_openid_client.a_exchange_token(
                token=credential.subject_token,
                subject_token_type=ID_TOKEN_TYPE if credential.id_token else ACCESS_TOKEN_TYPE,
                subject_issuer=alias,
                requested_token_type=ACCESS_TOKEN_TYPE
            )

            if not isinstance(token_data, dict) or "access_token" not in token_data:
                raise BackendFailure(
                    "Invalid token response from Keycloak",
                    reason="invalid_token_response",
                    operation="sign_in",
                    provider_identifier=credential.provider_identifier
                )

            # Token comes straight from Keycloak; only the subject is needed
            claims = jwt.get_unverified_claims(token_data["access_token"])
            user_id = claims.get("sub")
            if not user_id:
                raise BackendFailure(
                    "Keycloak token has no subject",
                    reason="invalid_token_response",
                    operation="sign_in",
                    provider_identifier=credential.provider_identifier
                )

            logger.info(f"Successfully signed in user {user_id} with {alias}")
            return user_id

        except BackendFailure:
            raise
        except Exception as e:
            logger.error(f"Failed to sign in with {alias}: {e}")
            raise BackendFailure(
                self._describe(e, "Sign-in failed"),
                reason="keycloak_token_exchange_error",
                operation="sign_in",
                provider_identifier=credential.provider_identifier,
                context={"alias": alias, "error": str(e)}
            )

    def _federated_identity(self, credential: Credential) -> tuple:
        """Get (provider user ID, provider username) for a credential.

        Falls back to the ``sub`` and ``email``/``preferred_username``
        claims of the provider's ID token.
        """
        provider_user_id = credential.provider_user_id
        provider_username = credential.provider_username

        if (not provider_user_id or not provider_username) and credential.id_token:
            try:
                claims = jwt.get_unverified_claims(credential.id_token)
            except JWTError as e:
                raise BackendFailure(
                    "Provider ID token could not be read",
                    reason="invalid_credential",
                    operation="link",
                    provider_identifier=credential.provider_identifier,
                    context={"error": str(e)}
                )
            provider_user_id = provider_user_id or claims.get("sub")
            provider_username = provider_username or claims.get("preferred_username") or claims.get("email")

        if not provider_user_id:
            raise BackendFailure(
                "Credential does not identify the provider account",
                reason="invalid_credential",
                operation="link",
                provider_identifier=credential.provider_identifier
            )

        return provider_user_id, provider_username or provider_user_id

    @staticmethod
    def _describe(error: Exception, default: str) -> str:
        message = getattr(error, "error_message", None)
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return str(message) if message else default

    @staticmethod
    def _reason(error: Exception, conflict: str = "keycloak_admin_error", not_found: str = "keycloak_admin_error") -> str:
        status = getattr(error, "response_code", None)
        if status == 409:
            return conflict
        if status == 404:
            return not_found
        return "keycloak_admin_error"
