# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Slack incoming-webhook notifier."""
from typing import Any

from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import SlackSettings


class SlackWebhook(HttpCollaborator):
    """Posts messages to a Slack incoming webhook."""

    def __init__(self, settings: SlackSettings) -> None:
        super().__init__("slack", settings.timeout_seconds)
        self.settings = settings

    async def notify(self, message: dict[str, Any]) -> None:
        payload = dict(message)
        if self.settings.channel:
            payload.setdefault("channel", self.settings.channel)
        async with self._http_client() as client:
            await self._send(client.post(self.settings.webhook_url, json=payload))
