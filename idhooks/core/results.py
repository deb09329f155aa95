# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Result vocabulary understood by the identity platform.

Every blocking hook invocation produces exactly one of the variants below.
Results serialise to the platform's camelCase field names:

    >>> Redirect(redirect_url="https://idp/authorize", session={}).to_host()
    {'kind': 'redirect', 'redirectUrl': 'https://idp/authorize', 'session': {}}
"""
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class AuthenticatorType(StrEnum):
    """Kinds of authenticator a hook may enroll on the customer's behalf."""

    EMAIL = "EMAIL"
    PHONE = "PHONE"


class _HostModel(BaseModel):
    """Base for models handed back to the platform."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_host(self) -> dict[str, Any]:
        """Serialise with the platform's field names."""
        return self.model_dump(mode="json", by_alias=True)


class AdditionalAuthenticator(_HostModel):
    """A contact channel the hook has verified independently.

    Attributes:
        type: Authenticator type (EMAIL or PHONE).
        target: Email address or phone number.
    """

    type: AuthenticatorType
    target: str


class Continue(_HostModel):
    """Allow the registration flow to proceed.

    Attributes:
        attributes: Attribute set to store, original attributes merged with additions.
        additional_authenticators: Verified authenticators to enroll.
        session: Session, possibly extended by the hook.
    """

    kind: Literal["continue"] = "continue"
    attributes: dict[str, Any]
    additional_authenticators: list[AdditionalAuthenticator] = Field(default_factory=list)
    session: dict[str, Any] = Field(default_factory=dict)


class AllowAuthentication(_HostModel):
    """Allow authentication to proceed (post-identification hooks only).

    Attributes:
        session: Session, possibly extended by the hook.
        allow_remembered_authenticators: Whether previously remembered
            authenticators may be honoured.
        authenticators_to_ignore: Authenticator IDs that must be re-verified.
    """

    kind: Literal["allow_authentication"] = "allow_authentication"
    session: dict[str, Any] = Field(default_factory=dict)
    allow_remembered_authenticators: bool = True
    authenticators_to_ignore: list[str] = Field(default_factory=list)


class Redirect(_HostModel):
    """Hand control to an external authority.

    The platform invokes the same hook again with a continue context once
    the user returns.
    """

    kind: Literal["redirect"] = "redirect"
    redirect_url: str
    session: dict[str, Any] = Field(default_factory=dict)


class ShowError(_HostModel):
    """Abort the flow with a soft, user-facing explanation."""

    kind: Literal["show_error"] = "show_error"
    message: str = Field(
        validation_alias=AliasChoices("message", "errorMessage"),
        serialization_alias="errorMessage",
    )
    session: dict[str, Any] = Field(default_factory=dict)


class Deny(_HostModel):
    """Abort the flow with a hard failure meant for machines and logs.

    Attributes:
        error: Short error code.
        description: Human-readable description, free of internal detail.
    """

    kind: Literal["deny"] = "deny"
    error: str
    description: str = ""


HookResult = Annotated[
    Continue | AllowAuthentication | Redirect | ShowError | Deny,
    Field(discriminator="kind"),
]

_result_adapter: TypeAdapter[HookResult] = TypeAdapter(HookResult)


def parse_result(data: dict[str, Any]) -> HookResult:
    """Parse a serialised result back into its variant.

    Args:
        data: Result as produced by ``to_host()`` or ``model_dump()``.

    Returns:
        The matching result variant.

    Raises:
        pydantic.ValidationError: If the data matches no variant.
    """
    return _result_adapter.validate_python(data)


def is_allowed(result: HookResult) -> bool:
    """Return True if the result lets the flow proceed."""
    return isinstance(result, (Continue, AllowAuthentication))
