# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""CRM pre-registration hooks: only known contacts may register.

One hook per CRM, all sharing the same decision: at least one contact
registered under the customer's primary email lets the registration
continue unchanged, no contact shows an error.
"""
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from loguru import logger

from idhooks.collaborators.base import ContactDirectory
from idhooks.collaborators.dynamics import DynamicsContacts
from idhooks.collaborators.hubspot import HubSpotContacts
from idhooks.collaborators.salesforce import SalesforceContacts
from idhooks.collaborators.servicenow import ServiceNowContacts
from idhooks.config import (
    DynamicsSettings,
    HookSettings,
    HubSpotSettings,
    SalesforceSettings,
    ServiceNowSettings,
)
from idhooks.core.results import Continue, HookResult, ShowError
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import BlockingHook, HookKind


SettingsT = TypeVar("SettingsT", bound=HookSettings)

NOT_VERIFIED_MESSAGE = "This account could not be verified."


class ContactLookupHook(BlockingHook[SettingsT]):
    """Gates registration on a CRM contact lookup by primary email."""

    kind: ClassVar[HookKind] = HookKind.PRE_REGISTRATION
    directory_type: ClassVar[Callable[[Any], ContactDirectory]]

    def __init__(self, settings: SettingsT, directory: ContactDirectory | None = None) -> None:
        super().__init__(settings)
        self.directory = directory or type(self).directory_type(settings)

    async def run(self, context: InvocationContext) -> HookResult:
        customer = context.customer
        email = customer.primary_email
        if not email:
            logger.info("No email to look up, not verified", hook=self.name)
            return ShowError(message=NOT_VERIFIED_MESSAGE, session=context.session_copy())

        contacts = await self.directory.find_contacts(email)
        if not contacts:
            logger.info("No contact found", email=email, hook=self.name)
            return ShowError(message=NOT_VERIFIED_MESSAGE, session=context.session_copy())

        logger.debug("Contact found: {count}", count=len(contacts), hook=self.name)
        return Continue(attributes=dict(customer.attributes), session=context.session_copy())


class HubSpotHook(ContactLookupHook[HubSpotSettings]):
    name: ClassVar[str] = "hubspot"
    directory_type = HubSpotContacts


class SalesforceHook(ContactLookupHook[SalesforceSettings]):
    name: ClassVar[str] = "salesforce"
    directory_type = SalesforceContacts


class ServiceNowHook(ContactLookupHook[ServiceNowSettings]):
    name: ClassVar[str] = "servicenow"
    directory_type = ServiceNowContacts


class DynamicsHook(ContactLookupHook[DynamicsSettings]):
    name: ClassVar[str] = "dynamics"
    directory_type = DynamicsContacts
