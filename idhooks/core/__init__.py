"""Core types, result vocabulary and exceptions shared by every hook."""

from idhooks.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    HooksError,
    MalformedResponseError,
    VerificationError,
)
from idhooks.core.results import (
    AdditionalAuthenticator,
    AllowAuthentication,
    AuthenticatorType,
    Continue,
    Deny,
    HookResult,
    Redirect,
    ShowError,
    is_allowed,
    parse_result,
)
from idhooks.core.types import (
    Application,
    ContinueContext,
    ContinueRequestParameters,
    Coordinates,
    Customer,
    InvocationContext,
    Location,
    OidcContext,
)


__all__ = [
    # Context
    "Application",
    "ContinueContext",
    "ContinueRequestParameters",
    "Coordinates",
    "Customer",
    "InvocationContext",
    "Location",
    "OidcContext",
    # Results
    "AdditionalAuthenticator",
    "AllowAuthentication",
    "AuthenticatorType",
    "Continue",
    "Deny",
    "HookResult",
    "Redirect",
    "ShowError",
    "is_allowed",
    "parse_result",
    # Exceptions
    "CollaboratorError",
    "ConfigurationError",
    "HooksError",
    "MalformedResponseError",
    "VerificationError",
]
