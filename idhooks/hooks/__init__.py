"""Hook implementations for identity platform integrations.

Exports:
    Hook: Protocol the platform runtime relies on.
    HookKind: Points in the flow where hooks run.
    BlockingHook, NotificationHook: Base classes for the two hook styles.
    create_hook: Factory building a hook from settings by name.
"""

from idhooks.hooks.base import BaseHook, BlockingHook, Hook, HookKind, NotificationHook
from idhooks.hooks.contacts import (
    ContactLookupHook,
    DynamicsHook,
    HubSpotHook,
    SalesforceHook,
    ServiceNowHook,
)
from idhooks.hooks.deduce import DeduceHook
from idhooks.hooks.eventbridge import EventBridgeHook
from idhooks.hooks.factory import HOOK_TYPES, create_hook
from idhooks.hooks.iddataweb import IdDataWebHook
from idhooks.hooks.seczetta import SecZettaHook
from idhooks.hooks.slack import SlackHook
from idhooks.hooks.splunk import SplunkHook


__all__ = [
    "BaseHook",
    "BlockingHook",
    "ContactLookupHook",
    "DeduceHook",
    "DynamicsHook",
    "EventBridgeHook",
    "HOOK_TYPES",
    "Hook",
    "HookKind",
    "HubSpotHook",
    "IdDataWebHook",
    "NotificationHook",
    "SalesforceHook",
    "SecZettaHook",
    "ServiceNowHook",
    "SlackHook",
    "SplunkHook",
    "create_hook",
]
