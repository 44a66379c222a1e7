from __future__ import annotations

import logging
import time

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from app.config import Settings, settings as default_settings
from app.models.repositories import BookRepository, ReviewRepository
from app.models.schemas import Book, BookFields, BookUpdate, Review, ReviewFields, ReviewUpdate
from app.storage.stable_map import StableMap

logging.basicConfig(level=getattr(logging, default_settings.log_level.upper(), logging.INFO))
logger = logging.getLogger("brs")


def get_books(request: Request) -> BookRepository:
    return request.app.state.books


def get_reviews(request: Request) -> ReviewRepository:
    return request.app.state.reviews


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings

    @app.on_event("startup")
    def open_stores() -> None:
        logger.info("brs.startup storage_path=%s", settings.storage_path)
        app.state.book_store = StableMap(settings.storage_path, settings.books_table, Book)
        app.state.review_store = StableMap(settings.storage_path, settings.reviews_table, Review)
        app.state.books = BookRepository(app.state.book_store)
        app.state.reviews = ReviewRepository(app.state.review_store)

    @app.on_event("shutdown")
    def close_stores() -> None:
        app.state.book_store.close()
        app.state.review_store.close()
        logger.info("brs.shutdown")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        logger.debug("request.started route=%s", route)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.failed route=%s storage_path=%s elapsed_ms=%.2f",
                route,
                settings.storage_path,
                (time.perf_counter() - started) * 1000,
            )
            raise
        logger.info(
            "request.completed route=%s status=%s elapsed_ms=%.2f",
            route,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
        return PlainTextResponse("Something went wrong!", status_code=500)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/book", response_model=Book, status_code=201)
    def add_book(fields: BookFields, books: BookRepository = Depends(get_books)) -> Book:
        return books.create(fields)

    @app.get("/books", response_model=list[Book])
    def list_books(books: BookRepository = Depends(get_books)) -> list[Book]:
        return books.get_all()

    @app.get("/books/{book_id}", response_model=Book)
    def get_book(book_id: str, books: BookRepository = Depends(get_books)) -> Book:
        book = books.get_by_id(book_id)
        if book is None:
            raise HTTPException(status_code=404, detail=f"the book with id={book_id} not found")
        return book

    @app.put("/books/{book_id}", response_model=Book)
    def update_book(book_id: str, changes: BookUpdate, books: BookRepository = Depends(get_books)) -> Book:
        book = books.update(book_id, changes)
        if book is None:
            raise HTTPException(status_code=400, detail=f"couldn't update a book with id={book_id}. book not found")
        return book

    @app.delete("/books/{book_id}", response_model=Book)
    def delete_book(book_id: str, books: BookRepository = Depends(get_books)) -> Book:
        book = books.delete(book_id)
        if book is None:
            raise HTTPException(status_code=400, detail=f"couldn't delete a book with id={book_id}. book not found")
        return book

    @app.get("/books/{book_id}/reviews", response_model=list[Review])
    def list_book_reviews(book_id: str, reviews: ReviewRepository = Depends(get_reviews)) -> list[Review]:
        return reviews.reviews_for_book(book_id)

    @app.post("/review", response_model=Review, status_code=201)
    def add_review(fields: ReviewFields, reviews: ReviewRepository = Depends(get_reviews)) -> Review:
        return reviews.create(fields)

    @app.get("/reviews", response_model=list[Review])
    def list_reviews(reviews: ReviewRepository = Depends(get_reviews)) -> list[Review]:
        return reviews.get_all()

    # must precede /reviews/{review_id}
    @app.get("/reviews/top", response_model=list[Review])
    def top_reviews(reviews: ReviewRepository = Depends(get_reviews)) -> list[Review]:
        return reviews.top_reviews(settings.top_reviews_limit)

    @app.get("/reviews/{review_id}", response_model=Review)
    def get_review(review_id: str, reviews: ReviewRepository = Depends(get_reviews)) -> Review:
        review = reviews.get_by_id(review_id)
        if review is None:
            raise HTTPException(status_code=404, detail=f"the review with id={review_id} not found")
        return review

    @app.put("/reviews/{review_id}", response_model=Review)
    def update_review(review_id: str, changes: ReviewUpdate, reviews: ReviewRepository = Depends(get_reviews)) -> Review:
        review = reviews.update(review_id, changes)
        if review is None:
            raise HTTPException(status_code=400, detail=f"couldn't update a review with id={review_id}. review not found")
        return review

    @app.delete("/reviews/{review_id}", response_model=Review)
    def delete_review(review_id: str, reviews: ReviewRepository = Depends(get_reviews)) -> Review:
        review = reviews.delete(review_id)
        if review is None:
            raise HTTPException(status_code=400, detail=f"couldn't delete a review with id={review_id}. review not found")
        return review

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
