# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""IDDataWeb pre-registration hook: identity verification via redirect.

First invocation (no continue context): redirect the user to IDDataWeb.
Second invocation (continue context present): exchange the authorization
code, verify the id_token, require an ``approve`` policy decision and
register the user with the verified attributes and phone number.

The redirect URI and host-supplied state are stashed in the session between
the two invocations; the hook itself keeps no state.
"""
from typing import Any, ClassVar

import phonenumbers
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from idhooks.collaborators.base import IdentityVerifier
from idhooks.collaborators.iddataweb import IdDataWebVerifier
from idhooks.config import IdDataWebSettings
from idhooks.core.exceptions import CollaboratorError, VerificationError
from idhooks.core.results import (
    AdditionalAuthenticator,
    AuthenticatorType,
    Continue,
    Deny,
    HookResult,
    Redirect,
)
from idhooks.core.types import ContinueContext, Customer, InvocationContext
from idhooks.hooks.base import BlockingHook, HookKind


STATE_SESSION_KEY = "iddataweb_state"
REDIRECT_URI_SESSION_KEY = "iddataweb_redirect_uri"
CONTINUE_PATH = "/login/api/v1/continue"


class _UserAttribute(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


class _EndpointInstance(BaseModel):
    userAttributes: list[_UserAttribute] | None = None


class _Endpoint(BaseModel):
    endpointInstanceList: list[_EndpointInstance] = Field(default_factory=list)


class VerificationClaims(BaseModel):
    """The parts of an IDDataWeb id_token the hook reads."""

    policyDecision: str | None = None
    endpoint: _Endpoint = Field(default_factory=_Endpoint)

    def user_attributes(self) -> dict[str, Any]:
        """Flatten every endpoint's user attribute values into one dict.

        Later endpoints override earlier ones for the same key.
        """
        flattened: dict[str, Any] = {}
        for instance in self.endpoint.endpointInstanceList:
            for attribute in instance.userAttributes or []:
                flattened.update(attribute.values)
        return flattened


def to_e164(number: str, country: str | None) -> str:
    """Normalise a phone number to E.164, using country as the default region.

    Raises:
        ValueError: If the number cannot be parsed or is not a possible number.
    """
    try:
        parsed = phonenumbers.parse(number, country)
    except phonenumbers.NumberParseException as e:
        raise ValueError(f"unparseable phone number: {e}") from e
    if not phonenumbers.is_possible_number(parsed):
        raise ValueError("phone number is not possible for its region")
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def verified_attributes(customer: Customer, user: dict[str, Any]) -> dict[str, Any]:
    """Merge verified user data over the customer's registration attributes.

    Raises:
        KeyError: If the verified data has no telephone.
        ValueError: If the telephone cannot be normalised.
    """
    street = " ".join(str(part) for part in (user.get("street_number"), user.get("route")) if part)
    return {
        **customer.attributes,
        "name": {
            "givenName": user.get("fname"),
            "middleName": user.get("mname"),
            "familyName": user.get("lname"),
        },
        "emails": {
            "primaryEmail": customer.identifiers.get("email") or customer.primary_email,
        },
        "phoneNumbers": {
            "primaryPhoneNumber": to_e164(str(user["telephone"]), user.get("country")),
        },
        "addresses": {
            "primary": {
                "city": user.get("locality"),
                "postalCode": user.get("postal_code"),
                "region": user.get("administrative_area_level_1"),
                "streetAddress": street,
            },
        },
        "country": user.get("country"),
    }


class IdDataWebHook(BlockingHook[IdDataWebSettings]):
    """Registers users only after IDDataWeb approves their identity."""

    name: ClassVar[str] = "iddataweb"
    kind: ClassVar[HookKind] = HookKind.PRE_REGISTRATION
    deny_error: ClassVar[str] = "verification_failed"

    def __init__(
        self,
        settings: IdDataWebSettings,
        verifier: IdentityVerifier | None = None,
    ) -> None:
        super().__init__(settings)
        self.verifier = verifier or IdDataWebVerifier(settings)

    def _redirect_uri(self, context: InvocationContext) -> str:
        params = context.continue_request_parameters
        if params and params.callback_url:
            return params.callback_url
        return self.settings.platform_url.rstrip("/") + CONTINUE_PATH

    async def run(self, context: InvocationContext) -> HookResult:
        if context.continue_context is None:
            return self._initiate(context)
        return await self._finalize(context, context.continue_context)

    def _initiate(self, context: InvocationContext) -> Redirect:
        session = context.session_copy()
        redirect_uri = self._redirect_uri(context)
        params = context.continue_request_parameters
        state = params.state if params else None

        session[REDIRECT_URI_SESSION_KEY] = redirect_uri
        if state:
            session[STATE_SESSION_KEY] = state
        else:
            session.pop(STATE_SESSION_KEY, None)

        logger.info("Redirecting to identity verification", hook=self.name)
        return Redirect(
            redirect_url=self.verifier.authorization_url(redirect_uri, state),
            session=session,
        )

    async def _finalize(self, context: InvocationContext, continue_context: ContinueContext) -> HookResult:
        session = context.session_copy()
        expected_state = session.pop(STATE_SESSION_KEY, None)
        redirect_uri = session.pop(REDIRECT_URI_SESSION_KEY, None) or self._redirect_uri(context)

        if expected_state is not None and continue_context.state != expected_state:
            raise VerificationError("continue state does not match the initiated flow")
        if not continue_context.code:
            raise VerificationError("continue context has no authorization code")

        raw_claims = await self.verifier.exchange_code(continue_context.code, redirect_uri)
        try:
            claims = VerificationClaims.model_validate(raw_claims)
        except ValidationError as e:
            raise VerificationError(f"unexpected claims shape: {e.error_count()} errors") from e

        if claims.policyDecision != "approve":
            raise VerificationError(f"policy decision was {claims.policyDecision!r}")

        try:
            attributes = verified_attributes(context.customer, claims.user_attributes())
        except (KeyError, ValueError) as e:
            logger.warning("Failed to parse verification result: {error}", error=str(e), hook=self.name)
            return Deny(error="registration_failed", description="Failed to register account")

        # The phone number is verified by IDDataWeb, so enroll it directly
        return Continue(
            attributes=attributes,
            additional_authenticators=[
                AdditionalAuthenticator(
                    type=AuthenticatorType.PHONE,
                    target=attributes["phoneNumbers"]["primaryPhoneNumber"],
                ),
            ],
            session=session,
        )

    def on_collaborator_failure(
        self,
        context: InvocationContext,
        error: CollaboratorError | TimeoutError,
    ) -> HookResult:
        # Finalization must never succeed without a successful exchange
        logger.error(
            "Identity verification unavailable, denying: {error}",
            error=str(error) or type(error).__name__,
            hook=self.name,
        )
        return Deny(error=self.deny_error, description="Failed validation")
