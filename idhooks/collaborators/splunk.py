# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Splunk HTTP Event Collector sink."""
from typing import Any

from pydantic import BaseModel

from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import SplunkSettings
from idhooks.core.exceptions import CollaboratorError


class CollectorResponse(BaseModel):
    text: str = ""
    code: int


class SplunkCollector(HttpCollaborator):
    """Sends structured events to a Splunk HTTP Event Collector."""

    def __init__(self, settings: SplunkSettings) -> None:
        super().__init__("splunk", settings.timeout_seconds)
        self.settings = settings

    async def send(self, message: dict[str, Any]) -> None:
        """Send one event.

        Raises:
            CollaboratorError: If the collector is unreachable or rejects the event.
        """
        body: dict[str, Any] = {"event": message, "sourcetype": self.settings.sourcetype}
        if self.settings.index:
            body["index"] = self.settings.index

        async with self._http_client() as client:
            response = await self._send(
                client.post(
                    f"{self.settings.url.rstrip('/')}/services/collector/event",
                    json=body,
                    headers={"Authorization": f"Splunk {self.settings.token}"},
                )
            )

        result = self._parse(response, CollectorResponse)
        if result.code != 0:
            raise CollaboratorError(f"splunk rejected event: {result.text}", self.name)
