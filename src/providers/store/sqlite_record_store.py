"""SQLite-backed IFSC record store.

Persists the last known-good branch record per IFSC code to a local SQLite
database at ``data/ifsc.db``.  Uses ``aiosqlite`` for async I/O and opens a
short-lived connection per operation.

Timestamps are stored as fixed-width UTC text
(``YYYY-MM-DDTHH:MM:SS.ffffffZ``) so the freshness count can compare them
lexicographically against the ``last_updated`` index.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
import structlog

from src.interfaces.record_store import IRecordStore
from src.models.ifsc import IFSCDetails, StoredRecord
from src.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/ifsc.db")
_DEFAULT_TIMEOUT = 5.0
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Record columns after the ``ifsc`` primary key, in payload order.
_DETAIL_COLUMNS = (
    "bank",
    "branch",
    "centre",
    "district",
    "state",
    "address",
    "contact",
    "imps",
    "rtgs",
    "city",
    "iso3166",
    "neft",
    "micr",
    "swift",
    "upi",
)
_FLAG_COLUMNS = frozenset({"imps", "rtgs", "neft", "upi"})

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS ifsc_records (
    ifsc          TEXT    PRIMARY KEY,
    bank          TEXT    NOT NULL DEFAULT '',
    branch        TEXT    NOT NULL DEFAULT '',
    centre        TEXT    NOT NULL DEFAULT '',
    district      TEXT    NOT NULL DEFAULT '',
    state         TEXT    NOT NULL DEFAULT '',
    address       TEXT    NOT NULL DEFAULT '',
    contact       TEXT    NOT NULL DEFAULT '',
    imps          INTEGER NOT NULL DEFAULT 0,
    rtgs          INTEGER NOT NULL DEFAULT 0,
    city          TEXT    NOT NULL DEFAULT '',
    iso3166       TEXT    NOT NULL DEFAULT '',
    neft          INTEGER NOT NULL DEFAULT 0,
    micr          TEXT    NOT NULL DEFAULT '',
    swift         TEXT    NOT NULL DEFAULT '',
    upi           INTEGER NOT NULL DEFAULT 0,
    last_updated  TEXT    NOT NULL,
    created_at    TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at    TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_ifsc_records_last_updated "
    "ON ifsc_records(last_updated);",
]

_ALL_COLUMNS = ("ifsc", *_DETAIL_COLUMNS, "last_updated")

_UPSERT_SQL = (
    f"INSERT INTO ifsc_records ({', '.join(_ALL_COLUMNS)})\n"
    f"VALUES ({', '.join('?' for _ in _ALL_COLUMNS)})\n"
    "ON CONFLICT(ifsc)\n"
    "DO UPDATE SET "
    + ",\n              ".join(
        f"{col} = excluded.{col}" for col in (*_DETAIL_COLUMNS, "last_updated")
    )
    + ",\n              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');"
)

_SELECT_SQL = (
    f"SELECT {', '.join(_ALL_COLUMNS)} FROM ifsc_records WHERE ifsc = ?;"
)


def _format_timestamp(value: datetime) -> str:
    """Render *value* as fixed-width UTC text.  Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def _row_to_record(row: aiosqlite.Row) -> StoredRecord:
    fields = {"ifsc": row["ifsc"]}
    for col in _DETAIL_COLUMNS:
        fields[col] = bool(row[col]) if col in _FLAG_COLUMNS else row[col]
    return StoredRecord(
        details=IFSCDetails.model_validate(fields),
        last_updated=_parse_timestamp(row["last_updated"]),
    )


class SQLiteRecordStore(IRecordStore):
    """SQLite-backed durable record store.

    Parameters
    ----------
    db_path:
        Database file.  Parent directories are created on
        :meth:`initialize`.
    timeout:
        Seconds to wait on a locked database before failing.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout

    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(str(self._db_path), timeout=self._timeout)

    async def initialize(self) -> None:
        """Create the records table and indices if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with self._connect() as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(
                message=f"Failed to initialize {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("ifsc_store_initialized", path=str(self._db_path))

    async def get(self, ifsc_code: str) -> StoredRecord | None:
        try:
            async with self._connect() as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_SQL, (ifsc_code,))
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(
                message=f"Failed to read {ifsc_code}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            return None
        try:
            return _row_to_record(row)
        except (ValueError, TypeError) as exc:
            logger.error("ifsc_store_corrupt_row", ifsc=ifsc_code, error=str(exc))
            raise StoreError(
                message=f"Corrupt record for {ifsc_code}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def upsert(self, details: IFSCDetails, last_updated: datetime) -> StoredRecord:
        """Insert or overwrite the record for ``details.ifsc`` in one statement."""
        params: list[object] = [details.ifsc]
        for col in _DETAIL_COLUMNS:
            value = getattr(details, col)
            params.append(int(value) if col in _FLAG_COLUMNS else value)
        params.append(_format_timestamp(last_updated))

        try:
            async with self._connect() as db:
                await db.execute(_UPSERT_SQL, params)
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(
                message=f"Failed to upsert {details.ifsc}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("ifsc_record_upserted", ifsc=details.ifsc)
        return StoredRecord(
            details=details,
            last_updated=_parse_timestamp(params[-1]),
        )

    async def count(self) -> int:
        return await self._scalar("SELECT COUNT(*) FROM ifsc_records;")

    async def count_updated_since(self, cutoff: datetime) -> int:
        return await self._scalar(
            "SELECT COUNT(*) FROM ifsc_records WHERE last_updated > ?;",
            (_format_timestamp(cutoff),),
        )

    async def _scalar(self, sql: str, params: tuple[object, ...] = ()) -> int:
        try:
            async with self._connect() as db:
                cursor = await db.execute(sql, params)
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(
                message=f"Count query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return int(row[0]) if row else 0

    def get_provider_name(self) -> str:
        return "sqlite_store"
