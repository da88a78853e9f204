from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_URL = "https://api.amazon.com/user/profile"


class ProfileClient:
    """Fetch the linked account's profile (name, email) with the caller's token."""

    def __init__(
        self,
        url: str = DEFAULT_PROFILE_URL,
        *,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, access_token: str) -> Optional[dict[str, Any]]:
        """Return the profile JSON, or None when it cannot be fetched."""

        try:
            response = self._session.get(
                self._url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._timeout,
            )
        except requests.RequestException:
            logger.exception("Error fetching user profile")
            return None

        if not response.ok:
            logger.warning("Profile request failed with status %s", response.status_code)
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("Profile response was not JSON")
            return None
