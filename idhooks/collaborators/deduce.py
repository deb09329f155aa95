# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Deduce insights API client."""
from pydantic import BaseModel

from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import DeduceSettings


class _InsightsData(BaseModel):
    score: str


class InsightsResponse(BaseModel):
    data: _InsightsData


class DeduceClient(HttpCollaborator):
    """Scores a registering customer's IP/email pair with Deduce."""

    def __init__(self, settings: DeduceSettings) -> None:
        super().__init__("deduce", settings.timeout_seconds)
        self.settings = settings

    async def score(self, ip_address: str, email: str | None) -> str:
        """Return Deduce's trust level for the pair (e.g. 'TRUSTED').

        Raises:
            CollaboratorError: If Deduce cannot be reached or answers badly.
        """
        body: dict[str, str] = {
            "site": self.settings.site,
            "apikey": self.settings.api_key,
            "ip": ip_address,
            "action": self.settings.action,
        }
        if email:
            body["email"] = email
        if self.settings.test_mode:
            body["test"] = "true"

        async with self._http_client() as client:
            response = await self._send(client.post(self.settings.url, json=body))
        return self._parse(response, InsightsResponse).data.score
