import tempfile
import unittest
from pathlib import Path

from application.auth_service import AuthService
from application.services import MSG_INVALID_CREDENTIALS
from infrastructure.account_directory import RecordStoreAccountDirectory
from infrastructure.db.record_store_memory import InMemoryRecordStore
from infrastructure.db.record_store_sqlite import SqliteRecordStore
from infrastructure.ids import TimestampIdGenerator
from infrastructure.session_store import RecordStoreSessionStore


def build_service(store) -> AuthService:
    ticks = iter(range(1000, 100000))
    return AuthService(
        directory=RecordStoreAccountDirectory(store),
        sessions=RecordStoreSessionStore(store),
        id_generator=TimestampIdGenerator(clock=lambda: 42),
        clock=lambda: next(ticks),
    )


class AuthServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryRecordStore()
        self.service = build_service(self.store)
        self.service.register("alice", "alice@example.com", "secret1")
        self.service.register("bob", "bob@example.com", "secret2")
        self.service.logout()

    def test_login_then_session_is_active(self):
        result = self.service.login("alice", "secret1")

        self.assertTrue(result.success)
        self.assertTrue(self.service.is_logged_in())
        self.assertEqual(self.service.get_user().username, "alice")

    def test_bad_login_establishes_nothing(self):
        result = self.service.login("nope", "wrong")

        self.assertFalse(result.success)
        self.assertEqual(result.error_message, MSG_INVALID_CREDENTIALS)
        self.assertFalse(self.service.is_logged_in())
        self.assertIsNone(self.service.get_user())

    def test_register_logs_the_new_account_in(self):
        result = self.service.register("carol", "carol@example.com", "secret3")

        self.assertTrue(self.service.is_logged_in())
        self.assertEqual(self.service.get_user(), result.user)

    def test_accounts_get_distinct_ids_from_a_stalled_clock(self):
        ids = list(self.service.directory.load())

        self.assertEqual(ids, ["u_42", "u_43"])

    def test_transaction_upsert(self):
        self.service.login("alice", "secret1")

        self.service.save_transaction("tx1", {"amount": 5})
        self.service.save_transaction("tx1", {"amount": 9})

        txs = self.service.get_transactions()
        self.assertEqual(len(txs), 1)
        self.assertEqual(txs[0].payload["amount"], 9)

    def test_ownership_follows_the_active_session(self):
        self.service.login("alice", "secret1")
        self.service.save_transaction("tx1", {"amount": 5})
        self.assertTrue(self.service.owns_transaction("tx1"))

        self.service.login("bob", "secret2")
        self.assertFalse(self.service.owns_transaction("tx1"))

        self.service.logout()
        self.assertFalse(self.service.owns_transaction("tx1"))
        self.assertEqual(self.service.get_transactions(), [])

    def test_transactions_without_session_are_ignored(self):
        before = dict(self.store.records)

        self.service.save_transaction("tx1", {"amount": 5})

        self.assertEqual(self.store.records, before)

    def test_corrupt_directory_reads_as_empty(self):
        self.store.set("tb_users", "{not json")

        self.assertEqual(self.service.directory.load(), {})
        result = self.service.register("alice", "alice@example.com", "secret1")
        self.assertTrue(result.success)

    def test_account_with_non_string_fields_reads_as_empty(self):
        self.store.set(
            "tb_users",
            '{"u_1": {"id": "u_1", "username": null, "email": "a@b.co",'
            ' "password": "secret1", "createdAt": 1}}',
        )

        with self.assertLogs("infrastructure.account_directory", level="WARNING"):
            login = self.service.login("alice", "secret1")
        self.assertFalse(login.success)
        self.assertEqual(login.error_message, MSG_INVALID_CREDENTIALS)

        register = self.service.register("alice", "alice@example.com", "secret1")
        self.assertTrue(register.success)


class AuthServiceRestartTests(unittest.TestCase):
    def test_state_survives_a_new_service_on_the_same_database(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = str(Path(tmp) / "auth.db")

            first = build_service(SqliteRecordStore(db_path))
            first.register("alice", "alice@example.com", "secret1")
            first.save_transaction("tx1", {"amount": 5, "note": "rent"})

            second = build_service(SqliteRecordStore(db_path))
            self.assertTrue(second.is_logged_in())
            self.assertEqual(second.get_user().username, "alice")
            self.assertTrue(second.owns_transaction("tx1"))
            self.assertEqual(
                second.get_transactions()[0].payload, {"amount": 5, "note": "rent"}
            )

            second.logout()
            third = build_service(SqliteRecordStore(db_path))
            self.assertFalse(third.is_logged_in())
            self.assertTrue(third.login("ALICE@example.com", "secret1").success)


if __name__ == "__main__":
    unittest.main()
