# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# idhooks/core/exceptions.py
"""Custom exceptions for idhooks."""


class HooksError(Exception):
    """Base exception for all idhooks errors."""

    pass


class ConfigurationError(HooksError):
    """Raised when required configuration is missing or invalid."""

    pass


class CollaboratorError(HooksError):
    """Raised when an external collaborator cannot be reached or rejects us.

    Covers transport failures, timeouts, non-2xx responses and failed
    authentication against the collaborator.

    Attributes:
        collaborator: Name of the collaborator that failed (if known).
    """

    def __init__(self, message: str, collaborator: str | None = None) -> None:
        """Initialize CollaboratorError.

        Args:
            message: Human-readable description of the failure.
            collaborator: Name of the collaborator that failed (optional).
        """
        self.collaborator = collaborator
        super().__init__(message)


class MalformedResponseError(CollaboratorError):
    """Raised when a collaborator response does not match its expected schema."""

    pass


class VerificationError(HooksError):
    """Raised when a collaborator's verdict cannot be trusted or is negative.

    Examples are a bad token signature or a policy decision other than approve.
    """

    pass
