# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Factory module for creating hook instances.

Maps hook names to their implementations and builds them from the matching
settings section, with their default vendor collaborators.
"""
from typing import Any

from idhooks.config import Settings
from idhooks.hooks.base import BaseHook
from idhooks.hooks.contacts import DynamicsHook, HubSpotHook, SalesforceHook, ServiceNowHook
from idhooks.hooks.deduce import DeduceHook
from idhooks.hooks.eventbridge import EventBridgeHook
from idhooks.hooks.iddataweb import IdDataWebHook
from idhooks.hooks.seczetta import SecZettaHook
from idhooks.hooks.slack import SlackHook
from idhooks.hooks.splunk import SplunkHook


HOOK_TYPES: dict[str, type[BaseHook[Any]]] = {
    hook_type.name: hook_type
    for hook_type in (
        DeduceHook,
        HubSpotHook,
        SalesforceHook,
        ServiceNowHook,
        DynamicsHook,
        IdDataWebHook,
        SecZettaHook,
        EventBridgeHook,
        SlackHook,
        SplunkHook,
    )
}


def create_hook(name: str, settings: Settings) -> BaseHook[Any]:
    """Factory to create a hook by name.

    Args:
        name: Registered hook name (e.g. 'hubspot').
        settings: Settings holding a section for the hook.

    Returns:
        A hook instance wired to its default collaborator.

    Raises:
        ValueError: If the hook name is unknown.
    """
    hook_type = HOOK_TYPES.get(name)
    if hook_type is None:
        raise ValueError(f"Unknown hook: {name}")
    return hook_type(settings.for_hook(name))
