# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""SecZetta risk-profile lookup."""
from typing import Any
import httpx
from pydantic import BaseModel

from idhooks.collaborators.http import HttpCollaborator
from idhooks.config import SecZettaSettings
from idhooks.core.exceptions import MalformedResponseError


class _Profile(BaseModel):
    id: str


class ProfilesResponse(BaseModel):
    profiles: list[_Profile]


class RiskScoresResponse(BaseModel):
    risk_scores: list[dict[str, Any]]


class SecZettaProfiles(HttpCollaborator):
    """Finds a people profile by user name and reads its latest risk score."""

    def __init__(self, settings: SecZettaSettings) -> None:
        super().__init__("seczetta", settings.timeout_seconds)
        self.settings = settings

    def _url(self, path: str) -> str:
        return str(httpx.URL(self.settings.base_url).join(path))

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Token token={self.settings.api_key}",
            "Accept": "application/json",
        }

    async def find_profile_id(self, user_name: str) -> str | None:
        """Return the ID of the first profile matching the user name, if any."""
        body = {
            "advanced_search": {
                "label": "All Contractors",
                "condition_rules_attributes": [
                    {
                        "type": "ProfileTypeRule",
                        "comparison_operator": "==",
                        "value": self.settings.profile_type_id,
                    },
                    {
                        "type": "ProfileAttributeRule",
                        "condition_object_id": self.settings.attribute_id,
                        "object_type": "NeAttribute",
                        "comparison_operator": "==",
                        "value": user_name,
                    },
                ],
            }
        }
        url = self._url("/api/advanced_search/run")

        async with self._http_client() as client:
            response = await self._send(client.post(url, json=body, headers=self._headers))

        profiles = self._parse(response, ProfilesResponse).profiles
        return profiles[0].id if profiles else None

    async def latest_risk_score(self, profile_id: str) -> float:
        """Return the configured score key of the most recent risk score.

        Raises:
            MalformedResponseError: If no score is recorded or the key is missing.
        """
        url = self._url("/api/risk_scores")

        async with self._http_client() as client:
            response = await self._send(
                client.get(url, params={"object_id": profile_id}, headers=self._headers)
            )

        scores = self._parse(response, RiskScoresResponse).risk_scores
        if not scores:
            raise MalformedResponseError(f"no risk scores for profile {profile_id}", self.name)

        latest = scores[-1].get(self.settings.risk_key)
        try:
            return float(latest)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"risk score has no numeric {self.settings.risk_key!r}", self.name
            ) from e
