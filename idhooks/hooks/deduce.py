# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Deduce pre-registration hook: only trusted sessions may register."""
from typing import ClassVar

from loguru import logger

from idhooks.collaborators.base import RiskScorer
from idhooks.collaborators.deduce import DeduceClient
from idhooks.config import DeduceSettings
from idhooks.core.results import Continue, Deny, HookResult
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import BlockingHook, HookKind


class DeduceHook(BlockingHook[DeduceSettings]):
    """Allows registration when Deduce scores the session as trusted."""

    name: ClassVar[str] = "deduce"
    kind: ClassVar[HookKind] = HookKind.PRE_REGISTRATION

    def __init__(self, settings: DeduceSettings, scorer: RiskScorer | None = None) -> None:
        super().__init__(settings)
        self.scorer = scorer or DeduceClient(settings)

    async def run(self, context: InvocationContext) -> HookResult:
        customer = context.customer
        email = customer.identifiers.get("email") or customer.primary_email
        score = await self.scorer.score(customer.ip_address, email)

        if score in self.settings.trusted_scores:
            return Continue(
                attributes=dict(customer.attributes),
                session=context.session_copy(),
            )

        logger.info("Session not trusted: {score}", score=score, hook=self.name)
        return Deny(error="1", description="User session is not trusted.")
