# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Invocation context models passed by the identity platform to every hook.

Contains the read-only snapshot a hook receives (InvocationContext) and its
parts: Application, OidcContext, Customer, Location, ContinueContext and
ContinueRequestParameters.
"""
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Application(BaseModel):
    """Application the flow was started from.

    Attributes:
        name: Application name.
        client_id: OAuth client ID of the application.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    client_id: str = ""


class OidcContext(BaseModel):
    """Information about the originating OpenID Connect request.

    Attributes:
        acr_values: Requested ACR values.
        ui_locales: Requested UI locales.
    """

    model_config = ConfigDict(frozen=True)

    acr_values: list[str] = Field(default_factory=list)
    ui_locales: list[str] = Field(default_factory=list)


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float | None = None
    longitude: float | None = None


class Location(BaseModel):
    """Geolocation of the customer, derived by the platform from the client IP."""

    model_config = ConfigDict(frozen=True)

    city: str | None = None
    state: str | None = None
    country: str | None = None
    country_code: str | None = None
    coordinates: Coordinates = Field(default_factory=Coordinates)


class Customer(BaseModel):
    """Customer related information.

    Attributes:
        ip_address: HTTP client IP coming from the X-Forwarded-For header.
        store: ID of the store containing the customer.
        attributes: Mutable profile fields (name, emails, phoneNumbers, addresses).
        identifiers: Immutable lookup keys (email, username).
        consents: Consents accepted by the customer.
        info: Stored information about an existing user (id, userName).
        groups: Groups the customer is a member of.
        location: Geolocation of the customer.
    """

    model_config = ConfigDict(frozen=True)

    ip_address: str = ""
    store: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    identifiers: dict[str, Any] = Field(default_factory=dict)
    consents: list[Any] = Field(default_factory=list)
    info: dict[str, Any] = Field(default_factory=dict)
    groups: list[Any] = Field(default_factory=list)
    location: Location = Field(default_factory=Location)

    @property
    def primary_email(self) -> str | None:
        """Primary email from attributes, falling back to the email identifier."""
        emails = self.attributes.get("emails")
        primary = emails.get("primaryEmail") if isinstance(emails, dict) else None
        return primary or self.identifiers.get("email")

    @property
    def user_name(self) -> str | None:
        """Stored user name, falling back to the username identifier."""
        return self.info.get("userName") or self.identifiers.get("username")


class ContinueContext(BaseModel):
    """Parameters passed back through the platform's /continue endpoint.

    Present only on the second invocation of a hook after a redirect round-trip.
    Providers may send extra parameters, which are kept.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    code: str | None = None
    state: str | None = None


class ContinueRequestParameters(BaseModel):
    """Parameters the hook should use when handing control to an external authority.

    Attributes:
        callback_url: Callback URL to use after a continue call.
        state: State parameter to use after a continue call.
    """

    model_config = ConfigDict(frozen=True)

    callback_url: str | None = None
    state: str | None = None


class InvocationContext(BaseModel):
    """Read-only snapshot passed to a hook on every invocation.

    The session is opaque to the hook contract. Hooks copy it, may add keys
    to the copy, and hand the copy back in their result.

    Attributes:
        application: Application related information.
        oidc_context: Information about the originating OIDC request.
        customer: Customer related information.
        session: Session store shared with the platform.
        continue_context: Present only after a redirect round-trip.
        continue_request_parameters: Callback URL and state for redirects.
        authenticators: Enrolled authenticators (post-identification only).
        requested_scopes: Scopes requested in the originating OIDC request.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    application: Application = Field(default_factory=Application)
    oidc_context: OidcContext = Field(default_factory=OidcContext)
    customer: Customer = Field(default_factory=Customer)
    session: dict[str, Any] = Field(default_factory=dict)
    continue_context: ContinueContext | None = Field(
        default=None,
        validation_alias=AliasChoices("continue_context", "continueContext"),
    )
    continue_request_parameters: ContinueRequestParameters | None = None
    authenticators: list[dict[str, Any]] = Field(default_factory=list)
    requested_scopes: list[str] = Field(default_factory=list)

    def session_copy(self) -> dict[str, Any]:
        """Return a shallow copy of the session for a hook to extend."""
        return dict(self.session)
