from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Record(CamelModel):
    id: str
    created_at: int
    updated_at: int


class BookFields(CamelModel):
    author: str
    title: str
    description: str


class BookUpdate(CamelModel):
    author: str | None = None
    title: str | None = None
    description: str | None = None


class Book(Record, BookFields):
    pass


class ReviewFields(CamelModel):
    book_id: str
    review: str
    rating: int | float


class ReviewUpdate(CamelModel):
    book_id: str | None = None
    review: str | None = None
    rating: int | float | None = None


class Review(Record, ReviewFields):
    pass
