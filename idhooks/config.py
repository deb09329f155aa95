# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Per-integration configuration with environment variable support.

Each integration has its own settings class with an env prefix, e.g.
DEDUCE_API_KEY overrides DeduceSettings.api_key. A YAML settings file can
supply the same values keyed by hook name; explicit file values win over
the environment.
"""
import os
from pathlib import Path
from typing import Any, ClassVar

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from idhooks.core.exceptions import ConfigurationError


class HookSettings(BaseSettings):
    """Settings shared by every integration.

    Attributes:
        fail_open: Let users through when the collaborator is unreachable.
        timeout_seconds: Timeout applied to every call to the collaborator.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    required: ClassVar[tuple[str, ...]] = ()

    fail_open: bool = Field(
        default=False,
        description="Allow the flow when the collaborator fails (fail-open)",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for each collaborator call",
    )

    def missing(self) -> list[str]:
        """Return the names of required settings that are unset."""
        return [name for name in self.required if getattr(self, name) in (None, "")]


class DeduceSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="DEDUCE_")

    required: ClassVar[tuple[str, ...]] = ("site", "api_key")

    url: str = "https://api.deducesecurity.com/insights"
    site: str = ""
    api_key: str = ""
    action: str = "auth.success.sso.mfaEnabled"
    test_mode: bool = False
    trusted_scores: list[str] = Field(default_factory=lambda: ["TRUSTED"])


class HubSpotSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="HUBSPOT_")

    required: ClassVar[tuple[str, ...]] = ("access_token",)

    base_url: str = "https://api.hubapi.com"
    access_token: str = ""


class SalesforceSettings(HookSettings):
    """Salesforce connected app credentials (OAuth username-password flow)."""

    model_config = SettingsConfigDict(env_prefix="SALESFORCE_")

    required: ClassVar[tuple[str, ...]] = ("username", "password", "client_id", "client_secret")

    login_url: str = Field(
        default="https://login.salesforce.com",
        description="Use https://test.salesforce.com for sandboxes",
    )
    api_version: str = "v59.0"
    username: str = ""
    password: str = ""
    client_id: str = ""
    client_secret: str = ""


class ServiceNowSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="SERVICENOW_")

    required: ClassVar[tuple[str, ...]] = (
        "base_url",
        "client_id",
        "client_secret",
        "username",
        "password",
    )

    base_url: str = Field(default="", description="Instance URL, e.g. https://dev1234.service-now.com/")
    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    password: str = ""


class DynamicsSettings(HookSettings):
    """Dynamics 365 app registration (Azure AD client credentials)."""

    model_config = SettingsConfigDict(env_prefix="DYNAMICS_")

    required: ClassVar[tuple[str, ...]] = ("tenant", "resource", "client_id", "client_secret")

    authority_host: str = "https://login.microsoftonline.com"
    tenant: str = ""
    resource: str = Field(default="", description="Organization URL, e.g. https://org.crm.dynamics.com/")
    api_version: str = "v9.1"
    client_id: str = ""
    client_secret: str = ""


class IdDataWebSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="IDDATAWEB_")

    required: ClassVar[tuple[str, ...]] = ("client_id", "client_secret", "platform_url")

    base_url: str = "https://prod1.iddataweb.com/prod-axn/axn/oauth2"
    client_id: str = ""
    client_secret: str = ""
    platform_url: str = Field(
        default="",
        description="Identity platform URL; its /login/api/v1/continue endpoint receives the callback",
    )
    scope: str = "openid country.US"
    algorithms: list[str] = Field(default_factory=lambda: ["RS256"])


class SecZettaSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="SECZETTA_")

    required: ClassVar[tuple[str, ...]] = (
        "api_key",
        "base_url",
        "attribute_id",
        "profile_type_id",
        "maximum_allowed_risk",
    )

    api_key: str = ""
    base_url: str = Field(default="", description="e.g. https://tenant.mynonemployee.com/api")
    attribute_id: str = Field(default="", description="Attribute ID holding the user name")
    profile_type_id: str = Field(default="", description="People profile type ID")
    allowable_risk: float | None = Field(
        default=None,
        description="Scores at or above this force re-verification of remembered authenticators",
    )
    maximum_allowed_risk: float | None = Field(
        default=None,
        description="Scores at or above this are rejected",
    )
    risk_key: str = "overall_score"


class EventBridgeSettings(HookSettings):
    """AWS EventBridge target.

    Leave the key fields empty to use the default AWS credential chain.
    """

    model_config = SettingsConfigDict(env_prefix="EVENTBRIDGE_")

    required: ClassVar[tuple[str, ...]] = ("region",)

    region: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    event_bus_name: str = "default"
    source: str = "idhooks"
    detail_type: str = "CustomerRegistration"


class SlackSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="SLACK_")

    required: ClassVar[tuple[str, ...]] = ("webhook_url",)

    webhook_url: str = ""
    channel: str | None = None
    resolve_hostnames: bool = True


class SplunkSettings(HookSettings):
    model_config = SettingsConfigDict(env_prefix="SPLUNK_")

    required: ClassVar[tuple[str, ...]] = ("url", "token")

    url: str = Field(default="", description="HTTP Event Collector base URL")
    token: str = ""
    sourcetype: str = "_json"
    index: str | None = None


class Settings(BaseModel):
    """Settings for every integration, keyed by hook name."""

    deduce: DeduceSettings = Field(default_factory=DeduceSettings)
    hubspot: HubSpotSettings = Field(default_factory=HubSpotSettings)
    salesforce: SalesforceSettings = Field(default_factory=SalesforceSettings)
    servicenow: ServiceNowSettings = Field(default_factory=ServiceNowSettings)
    dynamics: DynamicsSettings = Field(default_factory=DynamicsSettings)
    iddataweb: IdDataWebSettings = Field(default_factory=IdDataWebSettings)
    seczetta: SecZettaSettings = Field(default_factory=SecZettaSettings)
    eventbridge: EventBridgeSettings = Field(default_factory=EventBridgeSettings)
    slack: SlackSettings = Field(default_factory=SlackSettings)
    splunk: SplunkSettings = Field(default_factory=SplunkSettings)

    def for_hook(self, name: str) -> HookSettings:
        """Return the settings section for a hook.

        Raises:
            KeyError: If there is no section for the hook.
        """
        if name not in type(self).model_fields:
            raise KeyError(name)
        settings: HookSettings = getattr(self, name)
        return settings


DEFAULT_SETTINGS_PATH = Path("settings.idhooks.yaml")


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from a YAML file and the environment.

    Resolution order:
    1. Explicit config_path parameter (if provided)
    2. IDHOOKS_SETTINGS environment variable (if set)
    3. Default: 'settings.idhooks.yaml' in the current directory, if present

    With no file at the default location, settings come from the environment
    alone.

    Args:
        config_path: Optional explicit path to the configuration file.

    Returns:
        Settings populated from the file and environment.

    Raises:
        FileNotFoundError: If an explicitly named configuration file does not exist.
        yaml.YAMLError: If the YAML file is malformed.
        pydantic.ValidationError: If the configuration fails validation.
        ConfigurationError: If a section is not a mapping.
    """
    explicit = config_path is not None
    if config_path is None:
        env_path = os.environ.get("IDHOOKS_SETTINGS")
        explicit = bool(env_path)
        config_path = Path(env_path) if env_path else DEFAULT_SETTINGS_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    elif explicit:
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    # Sections are built through their own constructors so env vars still apply
    sections: dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        section_type = field.annotation
        if not (isinstance(section_type, type) and issubclass(section_type, HookSettings)):
            raise TypeError(f"Settings.{name} is not a HookSettings section")
        section_data = data.get(name) or {}
        if not isinstance(section_data, dict):
            raise ConfigurationError(f"Settings section '{name}' must be a mapping")
        sections[name] = section_type(**section_data)
    return Settings(**sections)
