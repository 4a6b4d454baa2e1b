from __future__ import annotations

import logging
from typing import Dict, Optional

from domain.models import Account
from domain.repositories import AccountDirectory, RecordStore
from infrastructure.codec import CorruptRecordError, decode_directory, encode_directory

logger = logging.getLogger(__name__)

USERS_KEY = "tb_users"


class RecordStoreAccountDirectory(AccountDirectory):
    """
    `AccountDirectory` persisted as one JSON document in a `RecordStore`.

    The whole directory is read and written in one go; there is no
    partial update at the storage boundary.
    """

    def __init__(self, store: RecordStore, key: str = USERS_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> Dict[str, Account]:
        text = self._store.get(self._key)
        if text is None:
            return {}
        try:
            return decode_directory(text)
        except CorruptRecordError as exc:
            logger.warning("Ignoring unreadable account directory under %r: %s", self._key, exc)
            return {}

    def save(self, accounts: Dict[str, Account]) -> None:
        self._store.set(self._key, encode_directory(accounts))

    def find_by_identifier(self, identifier: str) -> Optional[Account]:
        for account in self.load().values():
            if account.matches_identifier(identifier):
                return account
        return None
