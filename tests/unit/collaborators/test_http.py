"""Tests for shared HTTP collaborator plumbing."""

from unittest.mock import patch

import httpx
import pytest
from pydantic import BaseModel

from idhooks.collaborators.http import HttpCollaborator
from idhooks.core.exceptions import CollaboratorError, MalformedResponseError


class _Body(BaseModel):
    value: int


@pytest.fixture
def collaborator() -> HttpCollaborator:
    return HttpCollaborator("example", timeout_seconds=2.0)


async def _get(collaborator: HttpCollaborator) -> httpx.Response:
    async with collaborator._http_client() as client:
        return await collaborator._send(client.get("https://example.com/thing"))


async def test_successful_response_is_returned(collaborator: HttpCollaborator) -> None:
    with patch("httpx.AsyncClient.get") as mock_get:
        mock_get.return_value = httpx.Response(200, json={"value": 3})

        response = await _get(collaborator)

    assert collaborator._parse(response, _Body) == _Body(value=3)


async def test_timeout_becomes_collaborator_error(collaborator: HttpCollaborator) -> None:
    with patch("httpx.AsyncClient.get") as mock_get:
        mock_get.side_effect = httpx.ReadTimeout("read timed out")

        with pytest.raises(CollaboratorError, match="timed out") as exc_info:
            await _get(collaborator)

    assert exc_info.value.collaborator == "example"


async def test_connection_failure_becomes_collaborator_error(collaborator: HttpCollaborator) -> None:
    with patch("httpx.AsyncClient.get") as mock_get:
        mock_get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(CollaboratorError, match="request failed"):
            await _get(collaborator)


async def test_error_status_becomes_collaborator_error(collaborator: HttpCollaborator) -> None:
    with patch("httpx.AsyncClient.get") as mock_get:
        mock_get.return_value = httpx.Response(503, text="maintenance")

        with pytest.raises(CollaboratorError, match="503"):
            await _get(collaborator)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"unexpected": True}),
    ],
)
def test_malformed_body_is_rejected(collaborator: HttpCollaborator, response: httpx.Response) -> None:
    with pytest.raises(MalformedResponseError):
        collaborator._parse(response, _Body)
