# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Slack post-account-login hook: notify a channel about each login."""
import asyncio
import socket
from typing import Any, ClassVar

from loguru import logger

from idhooks.collaborators.base import Notifier
from idhooks.collaborators.slack import SlackWebhook
from idhooks.config import SlackSettings
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import NotificationHook


async def reverse_lookup(ip_address: str, timeout: float) -> str | None:
    """Return the host name for an IP, or None if the lookup fails."""
    if not ip_address:
        return None
    try:
        host, _, _ = await asyncio.wait_for(
            asyncio.to_thread(socket.gethostbyaddr, ip_address),
            timeout=timeout,
        )
    except (OSError, TimeoutError, UnicodeError) as e:
        logger.debug("Failed to look up dns: {error}", error=str(e) or type(e).__name__)
        return None
    return host


def login_message(context: InvocationContext, ip_label: str) -> dict[str, Any]:
    return {
        "text": "User completed login",
        "attachments": [
            {
                "fields": [
                    {"title": "Application Name", "value": context.application.name, "short": True},
                    {"title": "User ID", "value": context.customer.user_name, "short": True},
                    {"title": "IP", "value": ip_label, "short": True},
                ]
            }
        ],
    }


class SlackHook(NotificationHook[SlackSettings]):
    """Posts a login notification, with the client's reverse DNS when available."""

    name: ClassVar[str] = "slack"

    def __init__(self, settings: SlackSettings, notifier: Notifier | None = None) -> None:
        super().__init__(settings)
        self.notifier = notifier or SlackWebhook(settings)

    async def emit(self, context: InvocationContext) -> None:
        ip_label = context.customer.ip_address
        if self.settings.resolve_hostnames:
            domain = await reverse_lookup(ip_label, self.settings.timeout_seconds)
            if domain:
                ip_label = f"{ip_label} ({domain})"
        await self.notifier.notify(login_message(context, ip_label))
