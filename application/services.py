from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from domain.models import Account, PublicUser
from domain.repositories import AccountDirectory, IdGenerator, SessionStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,20}")
MIN_PASSWORD_LENGTH = 6

MSG_FIELDS_REQUIRED = "All fields are required."
MSG_INVALID_EMAIL = "Invalid email address."
MSG_PASSWORD_TOO_SHORT = "Password must be at least 6 characters."
MSG_INVALID_USERNAME = "Username must be 3–20 characters (letters, numbers, underscores)."
MSG_USERNAME_TAKEN = "Username already taken."
MSG_EMAIL_TAKEN = "An account with that email already exists."
MSG_CREDENTIALS_REQUIRED = "Please enter your credentials."
MSG_INVALID_CREDENTIALS = "Invalid username/email or password."


class AuthErrorKind(Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"


@dataclass
class AuthResult:
    """
    Outcome of a register/login attempt.

    On success `user` is the public projection that was made the current
    session. On failure `error_message` is meant to be shown to the user
    as-is and `error_kind` says which family of failure it was.
    """

    success: bool
    user: Optional[PublicUser] = None
    error_message: Optional[str] = None
    error_kind: Optional[AuthErrorKind] = None

    @classmethod
    def ok(cls, user: PublicUser) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, kind: AuthErrorKind, message: str) -> "AuthResult":
        return cls(success=False, error_message=message, error_kind=kind)


def _validate_registration(username: str, email: str, password: str) -> Optional[str]:
    if not username or not email or not password:
        return MSG_FIELDS_REQUIRED
    if not EMAIL_PATTERN.fullmatch(email):
        return MSG_INVALID_EMAIL
    if len(password) < MIN_PASSWORD_LENGTH:
        return MSG_PASSWORD_TOO_SHORT
    if not USERNAME_PATTERN.fullmatch(username):
        return MSG_INVALID_USERNAME
    return None


def register(
    username: str,
    email: str,
    password: str,
    directory: AccountDirectory,
    sessions: SessionStore,
    id_generator: IdGenerator,
    clock: Callable[[], int],
) -> AuthResult:
    """
    Create a new account and make it the current session.

    Checks run in a fixed order and stop at the first problem:
    - required fields, email shape, password length, username shape;
    - then one pass over existing accounts, testing username then email
      for each account in turn.
    """

    username = username.strip()
    email = email.strip().lower()

    error = _validate_registration(username, email, password)
    if error:
        return AuthResult.fail(AuthErrorKind.VALIDATION, error)

    accounts = directory.load()
    for existing in accounts.values():
        if existing.username.lower() == username.lower():
            return AuthResult.fail(AuthErrorKind.CONFLICT, MSG_USERNAME_TAKEN)
        if existing.email == email:
            return AuthResult.fail(AuthErrorKind.CONFLICT, MSG_EMAIL_TAKEN)

    account_id = id_generator.next_id()
    while account_id in accounts:
        account_id = id_generator.next_id()

    account = Account(
        id=account_id,
        username=username,
        email=email,
        password=password,
        created_at=clock(),
        transactions=[],
    )
    accounts[account_id] = account
    directory.save(accounts)

    user = account.to_public()
    sessions.establish(user)
    logger.info("Registered account %s (%s)", user.id, user.username)
    return AuthResult.ok(user)


def login(
    identifier: str,
    password: str,
    directory: AccountDirectory,
    sessions: SessionStore,
) -> AuthResult:
    """
    Authenticate by username or email and make the match the current session.

    An unknown identifier and a wrong password produce the same message so
    callers cannot probe which accounts exist.
    """

    identifier = identifier.strip().lower()
    if not identifier or not password:
        return AuthResult.fail(AuthErrorKind.VALIDATION, MSG_CREDENTIALS_REQUIRED)

    found: Optional[Account] = None
    for account in directory.load().values():
        if account.matches_identifier(identifier) and account.password == password:
            found = account
            break

    if found is None:
        logger.info("Rejected login attempt")
        return AuthResult.fail(AuthErrorKind.AUTHENTICATION, MSG_INVALID_CREDENTIALS)

    user = found.to_public()
    sessions.establish(user)
    logger.info("Logged in account %s (%s)", user.id, user.username)
    return AuthResult.ok(user)


def logout(sessions: SessionStore) -> None:
    current = sessions.current()
    sessions.clear()
    if current is not None:
        logger.info("Logged out account %s", current.id)
