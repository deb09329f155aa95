# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Splunk post-account-login hook: record each login as an audit event."""
from typing import Any, ClassVar

from idhooks.collaborators.base import AuditSink
from idhooks.collaborators.splunk import SplunkCollector
from idhooks.config import SplunkSettings
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import NotificationHook


def login_event(context: InvocationContext) -> dict[str, Any]:
    location = context.customer.location
    return {
        "action": "login",
        "user": context.customer.user_name,
        "src_ip": context.customer.ip_address,
        "application": context.application.name,
        "location": {
            "city": location.city,
            "state": location.state,
            "country": location.country,
            "country_code": location.country_code,
            "latitude": location.coordinates.latitude,
            "longitude": location.coordinates.longitude,
        },
    }


class SplunkHook(NotificationHook[SplunkSettings]):
    name: ClassVar[str] = "splunk"

    def __init__(self, settings: SplunkSettings, sink: AuditSink | None = None) -> None:
        super().__init__(settings)
        self.sink = sink or SplunkCollector(settings)

    async def emit(self, context: InvocationContext) -> None:
        await self.sink.send(login_event(context))
