from __future__ import annotations

import logging
import random
import string
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import ALEXA_DOC_PREFIX, ALEXA_ID_PREFIX
from ..core.exceptions import AccountLinkingRequired, StoreError
from .model import Credential
from .profile_client import ProfileClient
from .repository import CredentialRepository

logger = logging.getLogger(__name__)

_KEY_ALPHABET = string.ascii_lowercase + string.digits


class IdentityService:
    """Use case: map a voice caller to the attendance key that scopes their data.

    A voice user whose profile email matches a web account shares that
    account's key, so both surfaces read the same attendance document.
    """

    def __init__(
        self,
        credentials: CredentialRepository,
        profiles: Optional[ProfileClient] = None,
        *,
        clock: Callable[[], datetime] = now_local,
        rng: Optional[random.Random] = None,
    ):
        self._credentials = credentials
        self._profiles = profiles
        self._clock = clock
        self._rng = rng or random.Random()

    def resolve_caller(self, user_id: str, access_token: Optional[str]) -> str:
        if not access_token:
            raise AccountLinkingRequired("No access token available")
        return self.find_or_create_mapping(user_id, access_token)

    def _new_key(self) -> str:
        millis = int(self._clock().timestamp() * 1000)
        suffix = "".join(self._rng.choice(_KEY_ALPHABET) for _ in range(9))
        return f"key-{millis}-{suffix}"

    def _create_alexa_credential(
        self,
        user_id: str,
        profile: Optional[dict],
        *,
        linked: Optional[Credential] = None,
    ) -> str:
        profile = profile or {}
        credential = Credential(
            doc_id=f"{ALEXA_DOC_PREFIX}{user_id}",
            key=linked.key if linked and linked.key else self._new_key(),
            email=profile.get("email"),
            name=profile.get("name") or "Alexa User",
            type="alexa",
            alexa_user_id=user_id,
            linked_google_uid=linked.doc_id if linked else None,
            mapped_to_google=linked is not None,
            created_at=self._clock().isoformat(),
        )
        self._credentials.create(credential)
        logger.info("Created credential %s, linked=%s", credential.doc_id, linked is not None)
        return credential.key

    def find_or_create_mapping(self, user_id: str, access_token: str) -> str:
        try:
            existing = self._credentials.get(f"{ALEXA_DOC_PREFIX}{user_id}")
            if existing and existing.key:
                return existing.key

            profile = self._profiles.fetch(access_token) if self._profiles else None
            email = profile.get("email") if profile else None
            if email:
                web_user = self._credentials.find_by_email(email)
                if web_user and web_user.key:
                    logger.info("Linking %s to web user %s", user_id, web_user.doc_id)
                    return self._create_alexa_credential(user_id, profile, linked=web_user)
                logger.info("No web user found for the profile email")

            return self._create_alexa_credential(user_id, profile)
        except StoreError:
            logger.exception("User mapping lookup failed; creating a standalone credential")
            return self._create_alexa_credential(user_id, None)

    def get_attendance_key(self, identifier: str) -> str:
        """Attendance key for a platform id, an ``alexa-`` doc id or a web uid.

        Falls back to the identifier itself when nothing is stored.
        """

        doc_id = identifier
        if identifier.startswith(ALEXA_ID_PREFIX):
            doc_id = f"{ALEXA_DOC_PREFIX}{identifier}"

        try:
            credential = self._credentials.get(doc_id)
            if credential:
                if credential.linked_google_uid and credential.mapped_to_google:
                    linked = self._credentials.get(credential.linked_google_uid)
                    if linked and linked.key:
                        return linked.key
                if credential.key:
                    return credential.key

            if not identifier.startswith(ALEXA_DOC_PREFIX) and doc_id != identifier:
                web_user = self._credentials.get(identifier)
                if web_user and web_user.key:
                    return web_user.key
        except StoreError:
            logger.exception("Error getting attendance key")

        return identifier
