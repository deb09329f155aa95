# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Salesforce contact lookup over the REST query API."""
from typing import Any

import httpx
from pydantic import BaseModel, Field

from idhooks.collaborators.base import Contact
from idhooks.collaborators.http import HttpCollaborator, OAuthToken
from idhooks.config import SalesforceSettings
from idhooks.core.exceptions import CollaboratorError


class QueryResponse(BaseModel):
    totalSize: int
    records: list[dict[str, Any]] = Field(default_factory=list)


def soql_quote(value: str) -> str:
    """Quote a value for use as a SOQL string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class SalesforceContacts(HttpCollaborator):
    """Looks up Salesforce contacts by email address.

    Authenticates with the OAuth username-password flow on every lookup and
    queries the Contact object with SOQL.
    """

    def __init__(self, settings: SalesforceSettings) -> None:
        super().__init__("salesforce", settings.timeout_seconds)
        self.settings = settings

    async def _authenticate(self, client: httpx.AsyncClient) -> OAuthToken:
        response = await self._send(
            client.post(
                f"{self.settings.login_url.rstrip('/')}/services/oauth2/token",
                data={
                    "grant_type": "password",
                    "client_id": self.settings.client_id,
                    "client_secret": self.settings.client_secret,
                    "username": self.settings.username,
                    "password": self.settings.password,
                },
            )
        )
        token = self._parse(response, OAuthToken)
        if not token.instance_url:
            raise CollaboratorError("salesforce token response has no instance_url", self.name)
        return token

    async def find_contacts(self, email: str) -> list[Contact]:
        query = f"SELECT Id, Name, Email FROM Contact WHERE Email = {soql_quote(email)}"
        async with self._http_client() as client:
            token = await self._authenticate(client)
            response = await self._send(
                client.get(
                    f"{token.instance_url}/services/data/{self.settings.api_version}/query",
                    params={"q": query},
                    headers={"Authorization": f"Bearer {token.access_token}"},
                )
            )

        result = self._parse(response, QueryResponse)
        return [
            Contact(id=str(record.get("Id")), email=record.get("Email"), full_name=record.get("Name"))
            for record in result.records
        ]
