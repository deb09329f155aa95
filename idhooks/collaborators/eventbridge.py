# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""AWS EventBridge publisher."""
import asyncio
import json
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from idhooks.config import EventBridgeSettings
from idhooks.core.exceptions import CollaboratorError


class EventBridgePublisher:
    """Publishes events to an EventBridge bus.

    boto3 is synchronous, so each publish runs in a worker thread.
    """

    name = "eventbridge"

    def __init__(self, settings: EventBridgeSettings) -> None:
        self.settings = settings

    def _client(self) -> Any:
        credentials: dict[str, str] = {}
        if self.settings.access_key_id and self.settings.secret_access_key:
            credentials = {
                "aws_access_key_id": self.settings.access_key_id,
                "aws_secret_access_key": self.settings.secret_access_key,
            }
        return boto3.client(
            "events",
            region_name=self.settings.region,
            config=Config(
                connect_timeout=self.settings.timeout_seconds,
                read_timeout=self.settings.timeout_seconds,
                # One attempt, bounded by the timeout
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
            **credentials,
        )

    def _put(self, detail: dict[str, Any]) -> dict[str, Any]:
        response: dict[str, Any] = self._client().put_events(
            Entries=[
                {
                    "EventBusName": self.settings.event_bus_name,
                    "Source": self.settings.source,
                    "DetailType": self.settings.detail_type,
                    "Detail": json.dumps(detail),
                }
            ]
        )
        return response

    async def publish(self, detail: dict[str, Any]) -> None:
        """Put one event on the bus.

        Raises:
            CollaboratorError: If the call fails or the entry is rejected.
        """
        try:
            response = await asyncio.to_thread(self._put, detail)
        except (BotoCoreError, ClientError) as e:
            raise CollaboratorError(f"eventbridge put_events failed: {e}", self.name) from e

        if response.get("FailedEntryCount", 0):
            entry = (response.get("Entries") or [{}])[0]
            raise CollaboratorError(
                f"eventbridge rejected event: {entry.get('ErrorCode')} {entry.get('ErrorMessage')}",
                self.name,
            )
