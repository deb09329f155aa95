# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Microsoft Dynamics 365 contact lookup over the Web API."""
from typing import Any

from pydantic import BaseModel

from idhooks.collaborators.base import Contact
from idhooks.collaborators.http import HttpCollaborator, OAuthToken
from idhooks.config import DynamicsSettings


class ContactsResponse(BaseModel):
    value: list[dict[str, Any]]


def odata_quote(value: str) -> str:
    """Quote a value for use as an OData string literal."""
    return "'" + value.replace("'", "''") + "'"


class DynamicsContacts(HttpCollaborator):
    """Looks up Dynamics 365 contacts by primary email address.

    Acquires an Azure AD token with the client credentials grant for the
    organization resource, then queries the contacts entity set.
    """

    def __init__(self, settings: DynamicsSettings) -> None:
        super().__init__("dynamics", settings.timeout_seconds)
        self.settings = settings

    async def find_contacts(self, email: str) -> list[Contact]:
        resource = self.settings.resource.rstrip("/") + "/"
        token_url = (
            f"{self.settings.authority_host.rstrip('/')}/{self.settings.tenant}/oauth2/token"
        )

        async with self._http_client() as client:
            token_response = await self._send(
                client.post(
                    token_url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self.settings.client_id,
                        "client_secret": self.settings.client_secret,
                        "resource": resource,
                    },
                )
            )
            token = self._parse(token_response, OAuthToken)

            response = await self._send(
                client.get(
                    f"{resource}api/data/{self.settings.api_version}/contacts",
                    params={
                        "$select": "fullname,emailaddress1",
                        "$filter": f"emailaddress1 eq {odata_quote(email)}",
                    },
                    headers={
                        "Authorization": f"Bearer {token.access_token}",
                        "Accept": "application/json",
                        "OData-MaxVersion": "4.0",
                        "OData-Version": "4.0",
                    },
                )
            )

        contacts = self._parse(response, ContactsResponse)
        return [
            Contact(
                id=str(record.get("contactid", "")),
                email=record.get("emailaddress1"),
                full_name=record.get("fullname"),
            )
            for record in contacts.value
        ]
