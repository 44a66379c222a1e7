from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlitedict import SqliteDict

logger = logging.getLogger("brs")

RecordT = TypeVar("RecordT", bound=BaseModel)


class StableMap(Generic[RecordT]):
    """Durable string-keyed map of pydantic records, one SQLite table per map.

    Every mutation is committed as it happens, so the contents survive a
    restart without an explicit save. ``values()`` yields records in ascending
    key order.
    """

    def __init__(self, path: str | Path, table: str, record_type: type[RecordT]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.table = table
        self.record_type = record_type
        self.lock = threading.RLock()
        self._db = SqliteDict(
            str(path),
            tablename=table,
            autocommit=True,
            encode=self._encode,
            decode=self._decode,
        )
        logger.info("stable_map.opened path=%s table=%s records=%s", path, table, len(self._db))

    @staticmethod
    def _encode(record: BaseModel) -> str:
        return record.model_dump_json()

    def _decode(self, raw: str | bytes) -> RecordT:
        return self.record_type.model_validate_json(raw)

    def insert(self, key: str, value: RecordT) -> RecordT | None:
        with self.lock:
            previous = self._db.get(key)
            self._db[key] = value
            return previous

    def get(self, key: str) -> RecordT | None:
        with self.lock:
            return self._db.get(key)

    def remove(self, key: str) -> RecordT | None:
        with self.lock:
            previous = self._db.get(key)
            if previous is not None:
                del self._db[key]
            return previous

    def values(self) -> list[RecordT]:
        # sqlitedict iterates by rowid, which REPLACE INTO reshuffles on every overwrite
        with self.lock:
            return [value for _, value in sorted(self._db.items(), key=lambda item: item[0])]

    def __len__(self) -> int:
        with self.lock:
            return len(self._db)

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self._db

    def close(self) -> None:
        with self.lock:
            self._db.close()
        logger.info("stable_map.closed path=%s table=%s", self.path, self.table)
