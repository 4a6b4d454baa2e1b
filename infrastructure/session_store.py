from __future__ import annotations

import logging
from typing import Optional

from domain.models import PublicUser
from domain.repositories import RecordStore, SessionStore
from infrastructure.codec import CorruptRecordError, decode_public_user, encode_public_user

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "tb_current_user"


class RecordStoreSessionStore(SessionStore):
    """
    `SessionStore` kept under its own key in a `RecordStore`.

    Logging out removes the key entirely, so an absent key and a
    logged-out state are the same thing.
    """

    def __init__(self, store: RecordStore, key: str = CURRENT_USER_KEY) -> None:
        self._store = store
        self._key = key

    def is_active(self) -> bool:
        return self.current() is not None

    def current(self) -> Optional[PublicUser]:
        text = self._store.get(self._key)
        if text is None:
            return None
        try:
            return decode_public_user(text)
        except CorruptRecordError as exc:
            logger.warning("Ignoring unreadable session under %r: %s", self._key, exc)
            return None

    def establish(self, user: PublicUser) -> None:
        self._store.set(self._key, encode_public_user(user))

    def clear(self) -> None:
        self._store.remove(self._key)
