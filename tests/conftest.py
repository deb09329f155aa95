# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Shared fixtures and helpers for all tests.

Factory fixtures build invocation contexts and per-hook settings with
sensible defaults so each test only states what it cares about.
"""
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from loguru import logger

from idhooks.config import (
    DeduceSettings,
    DynamicsSettings,
    EventBridgeSettings,
    HookSettings,
    HubSpotSettings,
    IdDataWebSettings,
    SalesforceSettings,
    SecZettaSettings,
    ServiceNowSettings,
    SlackSettings,
    SplunkSettings,
)
from idhooks.core.types import InvocationContext


COMPLETE_SETTINGS: dict[str, tuple[type[HookSettings], dict[str, Any]]] = {
    "deduce": (DeduceSettings, {"site": "site-1", "api_key": "deduce-key"}),
    "hubspot": (HubSpotSettings, {"access_token": "hs-token"}),
    "salesforce": (
        SalesforceSettings,
        {"username": "api@example.com", "password": "pw", "client_id": "sf-id", "client_secret": "sf-secret"},
    ),
    "servicenow": (
        ServiceNowSettings,
        {
            "base_url": "https://dev1234.service-now.com/",
            "client_id": "sn-id",
            "client_secret": "sn-secret",
            "username": "admin",
            "password": "pw",
        },
    ),
    "dynamics": (
        DynamicsSettings,
        {
            "tenant": "tenant-1",
            "resource": "https://org.crm.dynamics.com/",
            "client_id": "dyn-id",
            "client_secret": "dyn-secret",
        },
    ),
    "iddataweb": (
        IdDataWebSettings,
        {"client_id": "idw-client", "client_secret": "idw-secret", "platform_url": "https://platform.example.com"},
    ),
    "seczetta": (
        SecZettaSettings,
        {
            "api_key": "sz-key",
            "base_url": "https://tenant.mynonemployee.com/api",
            "attribute_id": "attr-1",
            "profile_type_id": "ptype-1",
            "maximum_allowed_risk": 80.0,
        },
    ),
    "eventbridge": (EventBridgeSettings, {"region": "us-east-1"}),
    "slack": (SlackSettings, {"webhook_url": "https://hooks.slack.com/services/T/B/X"}),
    "splunk": (SplunkSettings, {"url": "https://splunk.example.com:8088", "token": "hec-token"}),
}


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep host env vars and .env files from leaking into settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("IDHOOKS_SETTINGS", raising=False)
    for _, (settings_type, _) in COMPLETE_SETTINGS.items():
        prefix = settings_type.model_config.get("env_prefix", "")
        for field in settings_type.model_fields:
            monkeypatch.delenv(f"{prefix}{field}".upper(), raising=False)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru output as formatted lines."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{level} {message} {extra}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def settings_factory() -> Callable[..., Any]:
    """Factory fixture for fully configured settings of one hook.

    Usage:
        settings = settings_factory("hubspot", fail_open=True)
    """

    def _create(name: str, **overrides: Any) -> Any:
        settings_type, defaults = COMPLETE_SETTINGS[name]
        return settings_type(**{**defaults, **overrides})

    return _create


@pytest.fixture
def context_factory() -> Callable[..., InvocationContext]:
    """Factory fixture for invocation contexts with a typical registering customer."""

    def _create(
        email: str | None = "jane@example.com",
        ip_address: str = "203.0.113.7",
        user_name: str | None = "jane",
        session: dict[str, Any] | None = None,
        continue_context: dict[str, Any] | None = None,
        continue_request_parameters: dict[str, Any] | None = None,
        attributes: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> InvocationContext:
        if attributes is None:
            attributes = {"name": {"givenName": "Jane"}}
            if email:
                attributes["emails"] = {"primaryEmail": email}
        return InvocationContext.model_validate(
            {
                "application": {"name": "Portal", "client_id": "portal-client"},
                "customer": {
                    "ip_address": ip_address,
                    "attributes": attributes,
                    "identifiers": {"email": email} if email else {},
                    "info": {"userName": user_name} if user_name else {},
                    "location": {
                        "city": "Denver",
                        "state": "Colorado",
                        "country": "United States",
                        "country_code": "US",
                        "coordinates": {"latitude": 39.74, "longitude": -104.99},
                    },
                },
                "session": session or {},
                "continue_context": continue_context,
                "continue_request_parameters": continue_request_parameters,
                **kwargs,
            }
        )

    return _create
