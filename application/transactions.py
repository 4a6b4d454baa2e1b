from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from domain.models import TransactionRef
from domain.repositories import AccountDirectory

logger = logging.getLogger(__name__)


def save_transaction(
    account_id: Optional[str],
    tx_id: str,
    payload: Mapping[str, Any],
    directory: AccountDirectory,
) -> None:
    """
    Record `tx_id` against the given account.

    - An id already on the account is replaced in place (same position).
    - A new id is appended.
    Nothing happens when there is no account id or the account is unknown.

    `payload` must hold JSON-encodable values only; anything else makes
    the save raise `TypeError` and leaves the stored directory unchanged.
    """

    if account_id is None:
        return

    accounts = directory.load()
    account = accounts.get(account_id)
    if account is None:
        logger.warning("Dropping transaction %s for unknown account %s", tx_id, account_id)
        return

    data: Dict[str, Any] = {key: value for key, value in payload.items() if key != "id"}
    ref = TransactionRef(id=tx_id, payload=data)

    for index, existing in enumerate(account.transactions):
        if existing.id == tx_id:
            account.transactions[index] = ref
            break
    else:
        account.transactions.append(ref)

    directory.save(accounts)
    logger.debug("Saved transaction %s for account %s", tx_id, account_id)


def list_transactions(
    account_id: Optional[str],
    directory: AccountDirectory,
) -> List[TransactionRef]:
    """Return the account's transactions in stored order, or [] if there are none."""

    if account_id is None:
        return []

    account = directory.load().get(account_id)
    if account is None:
        return []
    return account.transactions


def owns_transaction(
    account_id: Optional[str],
    tx_id: str,
    directory: AccountDirectory,
) -> bool:
    return any(tx.id == tx_id for tx in list_transactions(account_id, directory))
