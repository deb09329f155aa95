# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Shared httpx plumbing for collaborator clients."""
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from idhooks.core.exceptions import CollaboratorError, MalformedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


class HttpCollaborator:
    """Base for collaborators reached over HTTPS.

    Args:
        name: Collaborator name used in errors and logs.
        timeout_seconds: Timeout applied to every request.
    """

    def __init__(self, name: str, timeout_seconds: float = 10.0) -> None:
        self.name = name
        self._timeout = httpx.Timeout(timeout_seconds)

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Context manager for an HTTP client with the configured timeout.

        Yields:
            Configured httpx.AsyncClient instance.
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def _send(self, request: Awaitable[httpx.Response]) -> httpx.Response:
        """Await a request and reject transport failures and non-2xx statuses.

        Args:
            request: Pending httpx request, e.g. ``client.post(...)``.

        Returns:
            The successful response.

        Raises:
            CollaboratorError: On timeout, connection failure or non-2xx status.
        """
        try:
            response = await request
        except httpx.TimeoutException as e:
            raise CollaboratorError(f"{self.name} request timed out", self.name) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(f"{self.name} request failed: {e}", self.name) from e

        if not response.is_success:
            raise CollaboratorError(
                f"{self.name} returned {response.status_code}: {response.text[:200]}",
                self.name,
            )
        return response

    def _parse(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """Validate a JSON response body against a schema.

        Raises:
            MalformedResponseError: If the body is not JSON or does not match.
        """
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            # pydantic's ValidationError is a ValueError, as is JSONDecodeError
            detail = "schema mismatch" if isinstance(e, ValidationError) else "invalid JSON"
            raise MalformedResponseError(
                f"{self.name} returned a malformed response ({detail})",
                self.name,
            ) from e


class OAuthToken(BaseModel):
    """OAuth2 token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    instance_url: str | None = None
