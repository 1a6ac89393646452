# core/resolvers/book_creator.py
from enum import Enum
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from ..exceptions import UniqueConstraintError
from ..models.moly import ScrapedBook
from ..sa.models import Book
from ..sa.repositories.book import BookRepository
from ..utils.log import get_logger

class UpsertAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    PENDING_CLEARED = "pending_cleared"
    UNCHANGED = "unchanged"

class BookCreator:
    """Creates and updates book records from scraped data.

    Approved books belong to the curators: a sync may only move them off the
    pending shelf, every other field stays as the curator left it.
    """

    def __init__(self, session: Session):
        """
        Initialize the book creator.

        Args:
            session: SQLAlchemy session
        """
        self.session = session
        self.book_repository = BookRepository(session)
        self.logger = get_logger(self.__class__.__name__)

    def find_existing(self, book_data: ScrapedBook) -> Optional[Book]:
        """Match by moly id when the scrape has one, otherwise by the book page URL"""
        if book_data.moly_id:
            return self.book_repository.get_by_moly_id(book_data.moly_id)
        if book_data.url:
            return self.book_repository.get_by_alternative_url(book_data.url)
        return None

    def create_or_update(self, book_data: ScrapedBook) -> Tuple[Book, UpsertAction]:
        """
        Stores a scraped book.

          - new book: created, unapproved
          - approved book: only is_pending may go from True to False
          - unapproved book: every scraped field is replaced

        Returns:
            The stored book and what happened to it
        """
        existing_book = self.find_existing(book_data)

        if not existing_book:
            try:
                book = self.book_repository.create_book(book_data)
            except UniqueConstraintError:
                # Another sync created it since we looked
                existing_book = self.find_existing(book_data)
                if not existing_book:
                    raise
                self.logger.warning(f"Book {book_data.moly_id} was created concurrently, updating instead")
            else:
                self.logger.debug(f"Created book {book.title} ({book.moly_id})")
                return book, UpsertAction.CREATED

        if existing_book.is_approved:
            if existing_book.is_pending and not book_data.is_pending:
                book = self.book_repository.set_book_pending(existing_book.id, False)
                self.logger.debug(f"Approved book {book.title} is no longer pending")
                return book, UpsertAction.PENDING_CLEARED
            return existing_book, UpsertAction.UNCHANGED

        if self._is_unchanged(existing_book, book_data):
            return existing_book, UpsertAction.UNCHANGED

        book = self.book_repository.replace_book_fields(existing_book.id, book_data)
        self.logger.debug(f"Updated book {book.title} ({book.moly_id})")
        return book, UpsertAction.UPDATED

    def _is_unchanged(self, book: Book, book_data: ScrapedBook) -> bool:
        """True if storing book_data would not change any field of book"""
        genre = book_data.genre.value if book_data.genre else None
        return (
            (not book_data.moly_id or book.moly_id == book_data.moly_id)
            and book.title == book_data.title
            and book.year == book_data.year
            and book.genre == genre
            and book.series == book_data.series
            and book.series_number == book_data.series_number
            and book.is_pending == book_data.is_pending
            and [(alt.name, list(alt.urls)) for alt in book.alternatives]
                == [(alt.name, list(alt.urls)) for alt in book_data.alternatives]
            and book.author_ids == list(dict.fromkeys(book_data.author_ids))
        )
