from __future__ import annotations

import json
from typing import Any, Dict, List

from domain.models import Account, PublicUser, TransactionRef


class CorruptRecordError(ValueError):
    """Raised when stored text cannot be decoded into domain objects."""


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise CorruptRecordError(f"{key!r} is {type(value).__name__}, expected str")
    return value


def _transaction_to_dict(tx: TransactionRef) -> Dict[str, Any]:
    data = {key: value for key, value in tx.payload.items() if key != "id"}
    return {"id": tx.id, **data}


def _transaction_from_dict(data: Dict[str, Any]) -> TransactionRef:
    if not isinstance(data, dict):
        raise CorruptRecordError("transaction is not a JSON object")
    payload = {key: value for key, value in data.items() if key != "id"}
    return TransactionRef(id=_require_str(data, "id"), payload=payload)


def account_to_dict(account: Account) -> Dict[str, Any]:
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "password": account.password,
        "createdAt": account.created_at,
        "transactions": [_transaction_to_dict(tx) for tx in account.transactions],
    }


def account_from_dict(data: Dict[str, Any]) -> Account:
    if not isinstance(data, dict):
        raise CorruptRecordError("account is not a JSON object")
    # Records written before transactions existed carry no list at all.
    raw_transactions: List[Dict[str, Any]] = data.get("transactions") or []
    if not isinstance(raw_transactions, list):
        raise CorruptRecordError("'transactions' is not a list")
    return Account(
        id=str(data["id"]),
        username=_require_str(data, "username"),
        email=_require_str(data, "email"),
        password=_require_str(data, "password"),
        created_at=int(data["createdAt"]),
        transactions=[_transaction_from_dict(tx) for tx in raw_transactions],
    )


def public_user_to_dict(user: PublicUser) -> Dict[str, Any]:
    return {"id": user.id, "username": user.username, "email": user.email}


def public_user_from_dict(data: Dict[str, Any]) -> PublicUser:
    return PublicUser(
        id=str(data["id"]),
        username=_require_str(data, "username"),
        email=_require_str(data, "email"),
    )


def encode_directory(accounts: Dict[str, Account]) -> str:
    return json.dumps(
        {account_id: account_to_dict(account) for account_id, account in accounts.items()}
    )


def decode_directory(text: str) -> Dict[str, Account]:
    """
    Decode a stored directory.

    Any structural problem (bad JSON, a non-object at the top level, an
    account missing a required field or holding one of the wrong type)
    raises `CorruptRecordError`.
    """

    try:
        raw = json.loads(text)
    except ValueError as exc:
        raise CorruptRecordError(f"directory is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise CorruptRecordError("directory is not a JSON object")

    try:
        return {str(key): account_from_dict(value) for key, value in raw.items()}
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise CorruptRecordError(f"malformed account record: {exc!r}") from exc


def encode_public_user(user: PublicUser) -> str:
    return json.dumps(public_user_to_dict(user))


def decode_public_user(text: str) -> PublicUser:
    try:
        raw = json.loads(text)
    except ValueError as exc:
        raise CorruptRecordError(f"session is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise CorruptRecordError("session is not a JSON object")

    try:
        return public_user_from_dict(raw)
    except KeyError as exc:
        raise CorruptRecordError(f"session is missing {exc}") from exc
