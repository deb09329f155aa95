# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""The hook contract shared by every integration.

The identity platform calls ``invoke(context)`` and expects exactly one
result back from blocking hooks. Nothing may escape ``invoke``: the platform
has no generic exception-to-outcome mapping, so every failure is translated
here.

Failure mapping for blocking hooks:
    - Missing configuration -> Deny, never retried.
    - CollaboratorError (transport, auth, timeout, malformed response) ->
      Deny, or the hook's allow result when ``fail_open`` is set.
    - VerificationError -> Deny with a generic description.
    - Anything else -> Deny, logged with traceback.

Non-blocking hooks (post-account-login) are fire-and-forget: the platform
discards their outcome, so they log failures and return None.
"""
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from loguru import logger

from idhooks.config import HookSettings
from idhooks.core.exceptions import CollaboratorError, ConfigurationError, VerificationError
from idhooks.core.results import AllowAuthentication, Continue, Deny, HookResult
from idhooks.core.types import InvocationContext

SettingsT = TypeVar("SettingsT", bound=HookSettings)


class HookKind(StrEnum):
    """Points in the identity flow where the platform calls hooks."""

    PRE_REGISTRATION = "pre-registration"
    POST_IDENTIFICATION = "post-identification"
    POST_ACCOUNT_LOGIN = "post-account-login"

    @property
    def blocking(self) -> bool:
        """Whether the platform waits for the hook's result."""
        return self is not HookKind.POST_ACCOUNT_LOGIN


@runtime_checkable
class Hook(Protocol):
    """Protocol the platform runtime relies on."""

    name: str
    kind: HookKind

    async def invoke(self, context: InvocationContext) -> HookResult | None:
        """Run the hook for one invocation.

        Args:
            context: Read-only snapshot of the flow.

        Returns:
            The result for blocking hooks, None for non-blocking hooks.
        """
        ...


class BaseHook(ABC, Generic[SettingsT]):
    """Common state for hooks: a name, a kind, and injected settings."""

    name: ClassVar[str]
    kind: ClassVar[HookKind]

    def __init__(self, settings: SettingsT) -> None:
        self.settings = settings

    @property
    def blocking(self) -> bool:
        return self.kind.blocking

    @abstractmethod
    async def invoke(self, context: InvocationContext) -> HookResult | None:
        ...


class BlockingHook(BaseHook[SettingsT]):
    """Hook whose result gates the registration or authentication transaction.

    Subclasses implement ``run`` and raise HooksError subclasses for
    failures; ``invoke`` turns those into results.
    """

    deny_error: ClassVar[str] = "hook_failed"

    @abstractmethod
    async def run(self, context: InvocationContext) -> HookResult:
        """Decide the outcome for one invocation.

        Raises:
            ConfigurationError: If configuration is unusable.
            CollaboratorError: If the collaborator fails.
            VerificationError: If the collaborator's verdict cannot be trusted.
        """
        ...

    def allow(self, context: InvocationContext) -> HookResult:
        """Result that lets the flow proceed without changes.

        Used for fail-open. Pre-registration hooks continue with the original
        attributes; post-identification hooks allow authentication.
        """
        if self.kind is HookKind.POST_IDENTIFICATION:
            return AllowAuthentication(session=context.session_copy())
        return Continue(
            attributes=dict(context.customer.attributes),
            session=context.session_copy(),
        )

    async def invoke(self, context: InvocationContext) -> HookResult:
        missing = self.settings.missing()
        if missing:
            logger.error(
                "Missing required configuration, denying: {missing}",
                missing=", ".join(missing),
                hook=self.name,
            )
            return Deny(error="configuration_error", description="missing required configuration")

        try:
            result = await self.run(context)
        except ConfigurationError as e:
            logger.error("Invalid configuration, denying: {error}", error=str(e), hook=self.name)
            return Deny(error="configuration_error", description="invalid configuration")
        except (CollaboratorError, TimeoutError) as e:
            return self.on_collaborator_failure(context, e)
        except VerificationError as e:
            logger.warning("Verification failed: {error}", error=str(e), hook=self.name)
            return Deny(error=self.deny_error, description="Failed validation")
        except Exception:
            logger.exception("Unexpected hook failure, denying", hook=self.name)
            return Deny(error="internal_error", description="The request could not be processed")

        logger.info("Hook completed: {kind}", kind=result.kind, hook=self.name)
        return result

    def on_collaborator_failure(
        self,
        context: InvocationContext,
        error: CollaboratorError | TimeoutError,
    ) -> HookResult:
        """Apply the fail-open/fail-closed policy to a collaborator failure."""
        if self.settings.fail_open:
            logger.warning(
                "Collaborator failed, allowing (fail-open): {error}",
                error=str(error) or type(error).__name__,
                hook=self.name,
            )
            return self.allow(context)

        logger.error(
            "Collaborator failed, denying (fail-closed): {error}",
            error=str(error) or type(error).__name__,
            hook=self.name,
        )
        return Deny(error="collaborator_unavailable", description=f"{self.name} is unavailable")


class NotificationHook(BaseHook[SettingsT]):
    """Non-blocking hook that exists purely for side effects.

    The platform does not wait for it and discards its outcome, so every
    failure is logged here and never surfaced.
    """

    kind: ClassVar[HookKind] = HookKind.POST_ACCOUNT_LOGIN

    @abstractmethod
    async def emit(self, context: InvocationContext) -> None:
        """Perform the side effect (notification, audit event)."""
        ...

    async def invoke(self, context: InvocationContext) -> None:
        missing = self.settings.missing()
        if missing:
            logger.warning(
                "Missing required configuration, skipping: {missing}",
                missing=", ".join(missing),
                hook=self.name,
            )
            return None

        try:
            await self.emit(context)
        except Exception as e:
            logger.warning(
                "Notification failed: {error}",
                error=str(e) or type(e).__name__,
                hook=self.name,
            )
            return None

        logger.debug("Notification sent", hook=self.name)
        return None
