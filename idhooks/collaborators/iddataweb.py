# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""IDDataWeb identity verification over OAuth2 with JWKS-verified id_tokens."""
from typing import Any
import httpx
import jwt
from jwt import PyJWKSet
from jwt.exceptions import PyJWKSetError, PyJWTError
from loguru import logger
from pydantic import BaseModel

from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import IdDataWebSettings
from idhooks.core.exceptions import MalformedResponseError, VerificationError


class TokenResponse(BaseModel):
    id_token: str | None = None
    error: str | None = None
    error_description: str | None = None


class KeySetResponse(BaseModel):
    keys: list[dict[str, Any]]


class IdDataWebVerifier(HttpCollaborator):
    """Runs the IDDataWeb authorization-code flow.

    The id_token returned by the token endpoint is verified against the
    provider's published key set before any claim is trusted.
    """

    def __init__(self, settings: IdDataWebSettings) -> None:
        super().__init__("iddataweb", settings.timeout_seconds)
        self.settings = settings

    @property
    def _base_url(self) -> str:
        return self.settings.base_url.rstrip("/")

    def authorization_url(self, redirect_uri: str, state: str | None = None) -> str:
        params = {
            "client_id": self.settings.client_id,
            "scope": self.settings.scope,
            "response_type": "code",
            "redirect_uri": redirect_uri,
        }
        if state:
            params["state"] = state
        return str(httpx.URL(f"{self._base_url}/authorize", params=params))

    async def exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """Exchange an authorization code for verified id_token claims.

        Args:
            code: Authorization code from the continue context.
            redirect_uri: The redirect URI used when the flow was initiated.

        Returns:
            Decoded id_token claims.

        Raises:
            CollaboratorError: If the provider cannot be reached.
            MalformedResponseError: If the token or key set response is malformed.
            VerificationError: If the code is rejected or the token does not verify.
        """
        async with self._http_client() as client:
            response = await self._send(
                client.post(
                    f"{self._base_url}/token",
                    data={
                        "grant_type": "authorization_code",
                        "code": code,
                        "redirect_uri": redirect_uri,
                    },
                    auth=(self.settings.client_id, self.settings.client_secret),
                )
            )
            token = self._parse(response, TokenResponse)
            if token.error or not token.id_token:
                raise VerificationError(
                    token.error_description or token.error or "token response has no id_token"
                )

            jwks_response = await self._send(client.get(f"{self._base_url}/jwks.json"))

        keys = self._parse(jwks_response, KeySetResponse).keys
        try:
            key_set = PyJWKSet(keys)
        except PyJWKSetError as e:
            raise MalformedResponseError("iddataweb returned an unusable key set", self.name) from e

        return self._verify(token.id_token, key_set)

    def _verify(self, id_token: str, key_set: PyJWKSet) -> dict[str, Any]:
        try:
            kid = jwt.get_unverified_header(id_token).get("kid")
            signing_key = key_set[kid]
        except PyJWTError as e:
            raise VerificationError(f"id_token header is invalid: {e}") from e
        except KeyError as e:
            raise VerificationError(f"no signing key matches kid {kid!r}") from e

        try:
            claims: dict[str, Any] = jwt.decode(
                id_token,
                key=signing_key.key,
                algorithms=self.settings.algorithms,
                audience=self.settings.client_id,
            )
        except PyJWTError as e:
            raise VerificationError(f"id_token failed verification: {e}") from e

        logger.debug("Verified id_token", collaborator=self.name, kid=kid)
        return claims
