# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""EventBridge pre-registration hook: publish a registration event."""
from typing import Any, ClassVar

from loguru import logger

from idhooks.collaborators.base import EventPublisher
from idhooks.collaborators.eventbridge import EventBridgePublisher
from idhooks.config import EventBridgeSettings
from idhooks.core.exceptions import CollaboratorError
from idhooks.core.results import HookResult
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import BlockingHook, HookKind


def registration_detail(context: InvocationContext) -> dict[str, Any]:
    """Build the event detail describing a registration."""
    location = context.customer.location
    return {
        "E-mail": context.customer.primary_email,
        "Application": context.application.name,
        "Location": {
            "City": location.city,
            "State": location.state,
            "Country": location.country,
            "Country Code": location.country_code,
            "Latitude": location.coordinates.latitude,
            "Longitude": location.coordinates.longitude,
        },
    }


class EventBridgeHook(BlockingHook[EventBridgeSettings]):
    """Publishes each registration to EventBridge and always lets it continue.

    Publishing is a side effect: failures are logged and never change the
    registration outcome.
    """

    name: ClassVar[str] = "eventbridge"
    kind: ClassVar[HookKind] = HookKind.PRE_REGISTRATION

    def __init__(
        self,
        settings: EventBridgeSettings,
        publisher: EventPublisher | None = None,
    ) -> None:
        super().__init__(settings)
        self.publisher = publisher or EventBridgePublisher(settings)

    async def run(self, context: InvocationContext) -> HookResult:
        try:
            await self.publisher.publish(registration_detail(context))
        except CollaboratorError as e:
            logger.warning("Failed to publish registration event: {error}", error=str(e), hook=self.name)
        return self.allow(context)
