# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""SecZetta post-identification hook: gate authentication on a risk score."""
from typing import ClassVar

from loguru import logger

from idhooks.collaborators.base import RiskProfileService
from idhooks.collaborators.seczetta import SecZettaProfiles
from idhooks.config import SecZettaSettings
from idhooks.core.exceptions import ConfigurationError
from idhooks.core.results import AllowAuthentication, HookResult, ShowError
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import BlockingHook, HookKind
from idhooks.hooks.contacts import NOT_VERIFIED_MESSAGE


class SecZettaHook(BlockingHook[SecZettaSettings]):
    """Rejects users whose latest SecZetta risk score reaches the maximum.

    Scores at or above ``allowable_risk`` (when set) still authenticate, but
    remembered authenticators are not honoured, forcing a fresh second factor.
    """

    name: ClassVar[str] = "seczetta"
    kind: ClassVar[HookKind] = HookKind.POST_IDENTIFICATION

    def __init__(
        self,
        settings: SecZettaSettings,
        profiles: RiskProfileService | None = None,
    ) -> None:
        super().__init__(settings)
        self.profiles = profiles or SecZettaProfiles(settings)

    async def run(self, context: InvocationContext) -> HookResult:
        maximum = self.settings.maximum_allowed_risk
        if maximum is None:
            raise ConfigurationError("maximum_allowed_risk is not set")

        session = context.session_copy()
        user_name = context.customer.user_name
        profile_id = await self.profiles.find_profile_id(user_name) if user_name else None
        if profile_id is None:
            if self.settings.fail_open:
                logger.info("No risk profile, allowing (fail-open)", hook=self.name)
                return AllowAuthentication(session=session)
            logger.info("No risk profile, not verified", hook=self.name)
            return ShowError(message=NOT_VERIFIED_MESSAGE, session=session)

        score = await self.profiles.latest_risk_score(profile_id)
        if score >= maximum:
            logger.info(
                "Risk score {score} reaches maximum of {maximum}",
                score=score,
                maximum=maximum,
                hook=self.name,
            )
            return ShowError(
                message=f"A {score:g} risk score is too high. Maximum acceptable risk is {maximum:g}",
                session=session,
            )

        allowable = self.settings.allowable_risk
        if allowable is not None and score >= allowable:
            logger.info("Elevated risk score {score}, requiring step-up", score=score, hook=self.name)
            return AllowAuthentication(session=session, allow_remembered_authenticators=False)

        logger.info("Risk score {score} accepted", score=score, hook=self.name)
        return AllowAuthentication(session=session)
