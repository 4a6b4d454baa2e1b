import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from application.auth_service import AuthService
from domain.repositories import RecordStore
from infrastructure.account_directory import RecordStoreAccountDirectory
from infrastructure.db.record_store_file import FileRecordStore
from infrastructure.db.record_store_memory import InMemoryRecordStore
from infrastructure.db.record_store_postgres import PostgresRecordStore
from infrastructure.db.record_store_sqlite import SqliteRecordStore
from infrastructure.ids import TimestampIdGenerator, epoch_millis
from infrastructure.session_store import RecordStoreSessionStore

BACKENDS = ("sqlite", "postgres", "file", "memory")


@dataclass
class Settings:
    store_backend: str = "sqlite"
    db_path: str = "auth.db"
    data_dir: str = "auth_data"
    pg_params: dict = field(default_factory=dict)
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read settings from the environment.

    A `.env` file in the working directory is loaded first when reading
    the real process environment.
    """

    if environ is None:
        load_dotenv()
        environ = os.environ

    pg_params = {
        "host": environ.get("PGHOST", "localhost"),
        "port": int(environ.get("PGPORT", "5432")),
        "dbname": environ.get("PGDATABASE", "auth"),
        "user": environ.get("PGUSER", "postgres"),
        "password": environ.get("PGPASSWORD", ""),
    }
    return Settings(
        store_backend=environ.get("AUTH_STORE_BACKEND", "sqlite").lower(),
        db_path=environ.get("DB_PATH", "auth.db"),
        data_dir=environ.get("AUTH_DATA_DIR", "auth_data"),
        pg_params=pg_params,
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_record_store(settings: Settings) -> RecordStore:
    backend = settings.store_backend
    if backend == "sqlite":
        return SqliteRecordStore(settings.db_path)
    if backend == "postgres":
        return PostgresRecordStore(settings.pg_params)
    if backend == "file":
        return FileRecordStore(settings.data_dir)
    if backend == "memory":
        return InMemoryRecordStore()
    raise RuntimeError(
        f"Unknown AUTH_STORE_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}."
    )


def create_auth_service(settings: Optional[Settings] = None) -> AuthService:
    """Build an `AuthService` over the configured durable medium."""

    if settings is None:
        settings = load_settings()
        configure_logging(settings.log_level)

    store = create_record_store(settings)
    return AuthService(
        directory=RecordStoreAccountDirectory(store),
        sessions=RecordStoreSessionStore(store),
        id_generator=TimestampIdGenerator(),
        clock=epoch_millis,
    )
