"""Tests for the IDDataWeb verifier's token exchange and id_token checks."""

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from idhooks.collaborators.iddataweb import IdDataWebVerifier
from idhooks.core.exceptions import CollaboratorError, MalformedResponseError, VerificationError


REDIRECT_URI = "https://platform.example.com/login/api/v1/continue"
CLAIMS = {"aud": "idw-client", "policyDecision": "approve"}


@pytest.fixture(scope="module")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def jwks(private_key: rsa.RSAPrivateKey) -> dict[str, Any]:
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": "key-1", "alg": "RS256", "use": "sig"})
    return {"keys": [jwk]}


@pytest.fixture
def verifier(settings_factory: Callable[..., Any]) -> IdDataWebVerifier:
    return IdDataWebVerifier(settings_factory("iddataweb"))


def sign(private_key: rsa.RSAPrivateKey, claims: dict[str, Any], kid: str = "key-1") -> str:
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": kid})


async def exchange(
    verifier: IdDataWebVerifier,
    token_response: httpx.Response,
    jwks_response: httpx.Response | None = None,
) -> dict[str, Any]:
    with (
        patch("httpx.AsyncClient.post") as mock_post,
        patch("httpx.AsyncClient.get") as mock_get,
    ):
        mock_post.return_value = token_response
        mock_get.return_value = jwks_response or httpx.Response(200, json={"keys": []})
        return await verifier.exchange_code("auth-code", REDIRECT_URI)


def test_authorization_url(verifier: IdDataWebVerifier) -> None:
    url = verifier.authorization_url(REDIRECT_URI, "s-1")

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
        "https://prod1.iddataweb.com/prod-axn/axn/oauth2/authorize"
    )
    assert parse_qs(parts.query) == {
        "client_id": ["idw-client"],
        "scope": ["openid country.US"],
        "response_type": ["code"],
        "redirect_uri": [REDIRECT_URI],
        "state": ["s-1"],
    }


def test_authorization_url_without_state(verifier: IdDataWebVerifier) -> None:
    assert "state=" not in verifier.authorization_url(REDIRECT_URI)


async def test_exchange_returns_verified_claims(
    verifier: IdDataWebVerifier,
    private_key: rsa.RSAPrivateKey,
    jwks: dict[str, Any],
) -> None:
    token = sign(private_key, CLAIMS)

    with (
        patch("httpx.AsyncClient.post") as mock_post,
        patch("httpx.AsyncClient.get") as mock_get,
    ):
        mock_post.return_value = httpx.Response(200, json={"id_token": token})
        mock_get.return_value = httpx.Response(200, json=jwks)

        claims = await verifier.exchange_code("auth-code", REDIRECT_URI)

    assert claims == CLAIMS
    assert mock_post.call_args.args[0] == "https://prod1.iddataweb.com/prod-axn/axn/oauth2/token"
    assert mock_post.call_args.kwargs["data"] == {
        "grant_type": "authorization_code",
        "code": "auth-code",
        "redirect_uri": REDIRECT_URI,
    }
    assert mock_post.call_args.kwargs["auth"] == ("idw-client", "idw-secret")
    assert mock_get.call_args.args[0] == "https://prod1.iddataweb.com/prod-axn/axn/oauth2/jwks.json"


async def test_rejected_code(verifier: IdDataWebVerifier) -> None:
    response = httpx.Response(200, json={"error": "invalid_grant", "error_description": "code expired"})

    with pytest.raises(VerificationError, match="code expired"):
        await exchange(verifier, response)


async def test_token_signed_by_unknown_key(
    verifier: IdDataWebVerifier,
    jwks: dict[str, Any],
) -> None:
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    token = sign(other_key, CLAIMS)

    with pytest.raises(VerificationError, match="failed verification"):
        await exchange(verifier, httpx.Response(200, json={"id_token": token}), httpx.Response(200, json=jwks))


async def test_token_with_unknown_kid(
    verifier: IdDataWebVerifier,
    private_key: rsa.RSAPrivateKey,
    jwks: dict[str, Any],
) -> None:
    token = sign(private_key, CLAIMS, kid="rotated")

    with pytest.raises(VerificationError, match="no signing key"):
        await exchange(verifier, httpx.Response(200, json={"id_token": token}), httpx.Response(200, json=jwks))


async def test_token_for_another_audience(
    verifier: IdDataWebVerifier,
    private_key: rsa.RSAPrivateKey,
    jwks: dict[str, Any],
) -> None:
    token = sign(private_key, {**CLAIMS, "aud": "someone-else"})

    with pytest.raises(VerificationError):
        await exchange(verifier, httpx.Response(200, json={"id_token": token}), httpx.Response(200, json=jwks))


async def test_unusable_key_set(verifier: IdDataWebVerifier, private_key: rsa.RSAPrivateKey) -> None:
    token = sign(private_key, CLAIMS)

    with pytest.raises(MalformedResponseError):
        await exchange(
            verifier,
            httpx.Response(200, json={"id_token": token}),
            httpx.Response(200, json={"keys": []}),
        )


async def test_token_endpoint_outage(verifier: IdDataWebVerifier) -> None:
    with pytest.raises(CollaboratorError):
        await exchange(verifier, httpx.Response(502, text="bad gateway"))
