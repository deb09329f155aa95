# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Protocol interfaces for the external collaborators hooks depend on.

Hooks only ever talk to these protocols, so every vendor client can be
swapped for a test double implementing the same request/response contract.
Implementations raise CollaboratorError (or MalformedResponseError) for
transport, authentication and schema failures, and VerificationError when
a verdict cannot be trusted.
"""
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class Contact(BaseModel):
    """A CRM contact record, normalised across vendors.

    Attributes:
        id: Vendor record identifier.
        email: Email address on the record, when returned.
        full_name: Display name, when returned.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None
    full_name: str | None = None


@runtime_checkable
class RiskScorer(Protocol):
    """Risk/trust scoring API."""

    async def score(self, ip_address: str, email: str | None) -> str:
        """Return the trust level assigned to this IP/email pair.

        Raises:
            CollaboratorError: If the scoring API cannot be reached or answers badly.
        """
        ...


@runtime_checkable
class ContactDirectory(Protocol):
    """CRM contact lookup."""

    async def find_contacts(self, email: str) -> list[Contact]:
        """Return the contacts registered under an email address (possibly none).

        Raises:
            CollaboratorError: If the CRM cannot be reached or authentication fails.
        """
        ...


@runtime_checkable
class IdentityVerifier(Protocol):
    """OAuth2 identity-verification provider."""

    def authorization_url(self, redirect_uri: str, state: str | None = None) -> str:
        """Build the URL that starts the verification flow."""
        ...

    async def exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """Exchange an authorization code for verified token claims.

        Raises:
            CollaboratorError: If the provider cannot be reached.
            VerificationError: If the provider rejects the code or the token
                signature does not verify.
        """
        ...


@runtime_checkable
class RiskProfileService(Protocol):
    """Risk-profile service: profile search followed by risk score lookup."""

    async def find_profile_id(self, user_name: str) -> str | None:
        """Return the ID of the profile for a user, or None if there is none."""
        ...

    async def latest_risk_score(self, profile_id: str) -> float:
        """Return the most recent risk score recorded for a profile."""
        ...


@runtime_checkable
class EventPublisher(Protocol):
    """Event bus accepting fire-and-forget structured events."""

    async def publish(self, detail: dict[str, Any]) -> None:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Chat notification channel."""

    async def notify(self, message: dict[str, Any]) -> None:
        ...


@runtime_checkable
class AuditSink(Protocol):
    """Log/audit sink accepting structured messages."""

    async def send(self, message: dict[str, Any]) -> None:
        ...
