# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""ServiceNow contact lookup over the Table API."""
from typing import Any

from loguru import logger
from pydantic import BaseModel

from idhooks.collaborators.base import Contact
from idhooks.collaborators.http import HttpCollaborator, OAuthToken
from idhooks.config import ServiceNowSettings


class ContactsResponse(BaseModel):
    result: list[dict[str, Any]]


# Encoded queries have no escape syntax, so a value containing the
# condition separator cannot be queried safely
QUERY_SEPARATOR = "^"


class ServiceNowContacts(HttpCollaborator):
    """Looks up ServiceNow customer contacts by email address."""

    def __init__(self, settings: ServiceNowSettings) -> None:
        super().__init__("servicenow", settings.timeout_seconds)
        self.settings = settings

    @property
    def _base_url(self) -> str:
        return self.settings.base_url.rstrip("/")

    async def find_contacts(self, email: str) -> list[Contact]:
        if QUERY_SEPARATOR in email:
            logger.warning("Email contains a query separator, no contact can match", collaborator=self.name)
            return []

        async with self._http_client() as client:
            token_response = await self._send(
                client.post(
                    f"{self._base_url}/oauth_token.do",
                    data={
                        "grant_type": "password",
                        "client_id": self.settings.client_id,
                        "client_secret": self.settings.client_secret,
                        "username": self.settings.username,
                        "password": self.settings.password,
                    },
                )
            )
            token = self._parse(token_response, OAuthToken)

            response = await self._send(
                client.get(
                    f"{self._base_url}/api/now/contact",
                    params={"sysparm_query": f"email={email}"},
                    headers={
                        "Authorization": f"Bearer {token.access_token}",
                        "Accept": "application/json",
                    },
                )
            )

        contacts = self._parse(response, ContactsResponse)
        return [
            Contact(
                id=str(record.get("sys_id", "")),
                email=record.get("email"),
                full_name=record.get("name"),
            )
            for record in contacts.result
        ]
