# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""HubSpot CRM contact search."""
from typing import Any

from pydantic import BaseModel, Field

from idhooks.collaborators.base import Contact
from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import HubSpotSettings


class _HubSpotContact(BaseModel):
    id: str
    properties: dict[str, Any] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    total: int = 0
    results: list[_HubSpotContact]


class HubSpotContacts(HttpCollaborator):
    """Looks up HubSpot contacts by email address."""

    def __init__(self, settings: HubSpotSettings) -> None:
        super().__init__("hubspot", settings.timeout_seconds)
        self.settings = settings

    async def find_contacts(self, email: str) -> list[Contact]:
        url = f"{self.settings.base_url.rstrip('/')}/crm/v3/objects/contacts/search"
        body = {
            "filterGroups": [
                {"filters": [{"propertyName": "email", "operator": "EQ", "value": email}]}
            ],
            "sorts": [{"propertyName": "createdate", "direction": "DESCENDING"}],
            "properties": ["email", "firstname", "lastname"],
            "limit": 100,
        }
        headers = {"Authorization": f"Bearer {self.settings.access_token}"}

        async with self._http_client() as client:
            response = await self._send(client.post(url, json=body, headers=headers))

        search = self._parse(response, SearchResponse)
        return [
            Contact(
                id=result.id,
                email=result.properties.get("email"),
                full_name=" ".join(
                    part
                    for part in (result.properties.get("firstname"), result.properties.get("lastname"))
                    if part
                )
                or None,
            )
            for result in search.results
        ]
