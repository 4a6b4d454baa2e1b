from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional

from application import services, transactions
from application.services import AuthResult
from domain.models import PublicUser, TransactionRef
from domain.repositories import AccountDirectory, IdGenerator, SessionStore


class AuthService:
    """
    The in-process surface used by the page layer.

    Wraps the service functions with the directory, session store and id
    source they need, and resolves the current session before every
    transaction call.
    """

    def __init__(
        self,
        directory: AccountDirectory,
        sessions: SessionStore,
        id_generator: IdGenerator,
        clock: Callable[[], int],
    ) -> None:
        self.directory = directory
        self.sessions = sessions
        self._id_generator = id_generator
        self._clock = clock

    def register(self, username: str, email: str, password: str) -> AuthResult:
        return services.register(
            username,
            email,
            password,
            self.directory,
            self.sessions,
            self._id_generator,
            self._clock,
        )

    def login(self, identifier: str, password: str) -> AuthResult:
        return services.login(identifier, password, self.directory, self.sessions)

    def logout(self) -> None:
        services.logout(self.sessions)

    def is_logged_in(self) -> bool:
        return self.sessions.is_active()

    def get_user(self) -> Optional[PublicUser]:
        return self.sessions.current()

    def _current_account_id(self) -> Optional[str]:
        current = self.sessions.current()
        return current.id if current is not None else None

    def save_transaction(self, tx_id: str, payload: Mapping[str, Any]) -> None:
        transactions.save_transaction(
            self._current_account_id(), tx_id, payload, self.directory
        )

    def get_transactions(self) -> List[TransactionRef]:
        return transactions.list_transactions(self._current_account_id(), self.directory)

    def owns_transaction(self, tx_id: str) -> bool:
        return transactions.owns_transaction(
            self._current_account_id(), tx_id, self.directory
        )
