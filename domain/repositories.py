from __future__ import annotations

from typing import Dict, Optional, Protocol

from .models import Account, PublicUser


class RecordStore(Protocol):
    """
    Abstraction over the durable key/value medium.

    Values are opaque strings; encoding is the caller's business.
    Implementations must survive process restarts (except the in-memory
    one used by tests).
    """

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None if absent."""

        ...

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing anything already there."""

        ...

    def remove(self, key: str) -> None:
        """Delete `key`. Removing a missing key is not an error."""

        ...


class AccountDirectory(Protocol):
    """
    Owns the full mapping of account id -> `Account`.

    Reads and writes are always whole-directory: callers load, mutate in
    memory and save everything back.
    """

    def load(self) -> Dict[str, Account]:
        """
        Return every account keyed by id.

        Corrupt stored content is treated as an empty directory rather
        than an error.
        """

        ...

    def save(self, accounts: Dict[str, Account]) -> None:
        """Replace the stored directory with `accounts`."""

        ...

    def find_by_identifier(self, identifier: str) -> Optional[Account]:
        ...


class SessionStore(Protocol):
    """
    Holds the single active session pointer, if any.

    Only one session exists per medium; establishing a new one replaces
    the previous one.
    """

    def is_active(self) -> bool:
        ...

    def current(self) -> Optional[PublicUser]:
        ...

    def establish(self, user: PublicUser) -> None:
        ...

    def clear(self) -> None:
        ...


class IdGenerator(Protocol):
    """Source of new account ids."""

    def next_id(self) -> str:
        ...
