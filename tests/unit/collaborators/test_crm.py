"""Tests for the CRM contact directory clients."""

from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from idhooks.collaborators.base import Contact, ContactDirectory
from idhooks.collaborators.dynamics import DynamicsContacts, odata_quote
from idhooks.collaborators.hubspot import HubSpotContacts
from idhooks.collaborators.salesforce import SalesforceContacts, soql_quote
from idhooks.collaborators.servicenow import ServiceNowContacts
from idhooks.core.exceptions import CollaboratorError


class TestHubSpot:
    async def test_find_contacts(self, settings_factory: Callable[..., Any]) -> None:
        directory = HubSpotContacts(settings_factory("hubspot"))

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = httpx.Response(
                200,
                json={
                    "total": 1,
                    "results": [
                        {"id": "101", "properties": {"email": "jane@example.com", "firstname": "Jane", "lastname": "Doe"}}
                    ],
                },
            )

            contacts = await directory.find_contacts("jane@example.com")

        assert contacts == [Contact(id="101", email="jane@example.com", full_name="Jane Doe")]
        assert mock_post.call_args.args[0] == "https://api.hubapi.com/crm/v3/objects/contacts/search"
        assert mock_post.call_args.kwargs["headers"] == {"Authorization": "Bearer hs-token"}
        search_filter = mock_post.call_args.kwargs["json"]["filterGroups"][0]["filters"][0]
        assert search_filter == {"propertyName": "email", "operator": "EQ", "value": "jane@example.com"}

    async def test_no_results(self, settings_factory: Callable[..., Any]) -> None:
        directory = HubSpotContacts(settings_factory("hubspot"))

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = httpx.Response(200, json={"total": 0, "results": []})

            assert await directory.find_contacts("nobody@example.com") == []

    async def test_unauthorized(self, settings_factory: Callable[..., Any]) -> None:
        directory = HubSpotContacts(settings_factory("hubspot"))

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = httpx.Response(401, json={"message": "expired token"})

            with pytest.raises(CollaboratorError, match="401"):
                await directory.find_contacts("jane@example.com")


class TestSalesforce:
    async def test_find_contacts(self, settings_factory: Callable[..., Any]) -> None:
        directory = SalesforceContacts(settings_factory("salesforce"))

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("httpx.AsyncClient.get") as mock_get,
        ):
            mock_post.return_value = httpx.Response(
                200,
                json={"access_token": "sf-access", "instance_url": "https://acme.my.salesforce.com"},
            )
            mock_get.return_value = httpx.Response(
                200,
                json={"totalSize": 1, "records": [{"Id": "003A", "Name": "Jane Doe", "Email": "jane@example.com"}]},
            )

            contacts = await directory.find_contacts("jane@example.com")

        assert contacts == [Contact(id="003A", email="jane@example.com", full_name="Jane Doe")]
        assert mock_post.call_args.args[0] == "https://login.salesforce.com/services/oauth2/token"
        assert mock_post.call_args.kwargs["data"]["grant_type"] == "password"
        assert mock_get.call_args.args[0] == "https://acme.my.salesforce.com/services/data/v59.0/query"
        assert mock_get.call_args.kwargs["params"] == {
            "q": "SELECT Id, Name, Email FROM Contact WHERE Email = 'jane@example.com'"
        }

    async def test_token_without_instance_url(self, settings_factory: Callable[..., Any]) -> None:
        directory = SalesforceContacts(settings_factory("salesforce"))

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = httpx.Response(200, json={"access_token": "sf-access"})

            with pytest.raises(CollaboratorError, match="instance_url"):
                await directory.find_contacts("jane@example.com")

    def test_soql_quote_escapes(self) -> None:
        assert soql_quote("o'brien@example.com") == "'o\\'brien@example.com'"


class TestServiceNow:
    async def test_find_contacts(self, settings_factory: Callable[..., Any]) -> None:
        directory = ServiceNowContacts(settings_factory("servicenow"))

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("httpx.AsyncClient.get") as mock_get,
        ):
            mock_post.return_value = httpx.Response(200, json={"access_token": "sn-access"})
            mock_get.return_value = httpx.Response(
                200,
                json={"result": [{"sys_id": "abc123", "email": "jane@example.com", "name": "Jane Doe"}]},
            )

            contacts = await directory.find_contacts("jane@example.com")

        assert contacts == [Contact(id="abc123", email="jane@example.com", full_name="Jane Doe")]
        assert mock_post.call_args.args[0] == "https://dev1234.service-now.com/oauth_token.do"
        assert mock_get.call_args.args[0] == "https://dev1234.service-now.com/api/now/contact"
        assert mock_get.call_args.kwargs["params"] == {"sysparm_query": "email=jane@example.com"}
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "Bearer sn-access"

    @pytest.mark.parametrize(
        "email",
        ["a^NQsys_idISNOTEMPTY@evil.example", "a^ORemailISNOTEMPTY@evil.example"],
    )
    async def test_query_operators_in_email_match_nothing(
        self,
        email: str,
        settings_factory: Callable[..., Any],
    ) -> None:
        directory = ServiceNowContacts(settings_factory("servicenow"))

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("httpx.AsyncClient.get") as mock_get,
        ):
            mock_get.return_value = httpx.Response(200, json={"result": [{"sys_id": "any"}]})

            contacts = await directory.find_contacts(email)

        assert contacts == []
        mock_post.assert_not_called()
        mock_get.assert_not_called()


class TestDynamics:
    async def test_find_contacts(self, settings_factory: Callable[..., Any]) -> None:
        directory = DynamicsContacts(settings_factory("dynamics"))

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("httpx.AsyncClient.get") as mock_get,
        ):
            mock_post.return_value = httpx.Response(200, json={"access_token": "dyn-access"})
            mock_get.return_value = httpx.Response(
                200,
                json={"value": [{"contactid": "c-1", "fullname": "Jane Doe", "emailaddress1": "jane@example.com"}]},
            )

            contacts = await directory.find_contacts("jane@example.com")

        assert contacts == [Contact(id="c-1", email="jane@example.com", full_name="Jane Doe")]
        assert mock_post.call_args.args[0] == "https://login.microsoftonline.com/tenant-1/oauth2/token"
        assert mock_post.call_args.kwargs["data"]["resource"] == "https://org.crm.dynamics.com/"
        assert mock_get.call_args.args[0] == "https://org.crm.dynamics.com/api/data/v9.1/contacts"
        assert mock_get.call_args.kwargs["params"]["$filter"] == "emailaddress1 eq 'jane@example.com'"

    async def test_token_failure(self, settings_factory: Callable[..., Any]) -> None:
        directory = DynamicsContacts(settings_factory("dynamics"))

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = httpx.Response(400, json={"error": "invalid_client"})

            with pytest.raises(CollaboratorError):
                await directory.find_contacts("jane@example.com")

    def test_odata_quote_doubles_quotes(self) -> None:
        assert odata_quote("o'brien@example.com") == "'o''brien@example.com'"


@pytest.mark.parametrize(
    ("directory_type", "name"),
    [
        (HubSpotContacts, "hubspot"),
        (SalesforceContacts, "salesforce"),
        (ServiceNowContacts, "servicenow"),
        (DynamicsContacts, "dynamics"),
    ],
)
def test_clients_implement_contact_directory(
    directory_type: Any,
    name: str,
    settings_factory: Callable[..., Any],
) -> None:
    assert isinstance(directory_type(settings_factory(name)), ContactDirectory)
