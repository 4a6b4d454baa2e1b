from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class TransactionRef:
    """
    A caller-supplied transaction record attached to one account.

    `payload` is opaque to the store; only `id` is interpreted.
    """

    id: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PublicUser:
    """
    The part of an account that is safe to hand out to callers.

    This is also what the session pointer stores, so the password never
    leaves the directory.
    """

    id: str
    username: str
    email: str


@dataclass
class Account:
    """
    A registered account as held in the directory.

    The password is stored exactly as supplied. There is no hashing;
    anyone who can read the medium can read the credentials.
    """

    id: str
    username: str
    email: str
    password: str
    created_at: int
    transactions: List[TransactionRef] = field(default_factory=list)

    def to_public(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username, email=self.email)

    def matches_identifier(self, identifier: str) -> bool:
        """True if `identifier` is this account's username (any case) or email."""

        return (
            self.username.lower() == identifier.lower()
            or self.email == identifier
        )
