from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Generic

from pydantic import BaseModel

from app.models.schemas import Book, Review
from app.storage.stable_map import RecordT, StableMap

logger = logging.getLogger("brs")


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


class Repository(Generic[RecordT]):
    record_type: type[RecordT]
    kind: str

    def __init__(
        self,
        store: StableMap[RecordT],
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    def create(self, fields: BaseModel) -> RecordT:
        now = self._clock()
        record = self.record_type(id=self._id_factory(), created_at=now, updated_at=now, **fields.model_dump())
        self._store.insert(record.id, record)
        logger.info("%s.created id=%s", self.kind, record.id)
        return record

    def get_all(self) -> list[RecordT]:
        return self._store.values()

    def get_by_id(self, record_id: str) -> RecordT | None:
        return self._store.get(record_id)

    def update(self, record_id: str, changes: BaseModel) -> RecordT | None:
        with self._store.lock:
            current = self._store.get(record_id)
            if current is None:
                return None
            merged = {**current.model_dump(), **changes.model_dump(exclude_none=True), "updated_at": self._clock()}
            updated = self.record_type.model_validate(merged)
            self._store.insert(record_id, updated)
        logger.info("%s.updated id=%s", self.kind, record_id)
        return updated

    def delete(self, record_id: str) -> RecordT | None:
        removed = self._store.remove(record_id)
        if removed is not None:
            logger.info("%s.deleted id=%s", self.kind, record_id)
        return removed


class BookRepository(Repository[Book]):
    record_type = Book
    kind = "book"


class ReviewRepository(Repository[Review]):
    record_type = Review
    kind = "review"

    def reviews_for_book(self, book_id: str) -> list[Review]:
        return [review for review in self.get_all() if review.book_id == book_id]

    def top_reviews(self, n: int = 10) -> list[Review]:
        return sorted(self.get_all(), key=lambda review: review.rating, reverse=True)[:max(n, 0)]
