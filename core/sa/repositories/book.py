# core/sa/repositories/book.py
from typing import Optional, List
from sqlalchemy import String, cast
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from ..models import Book, BookAlternative, BookAuthor
from ...exceptions import EntityNotFound, UniqueConstraintError
from ...models.moly import Genre, ScrapedBook

class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a book by its primary key"""
        return self.session.get(Book, book_id)

    def get_by_moly_id(self, moly_id: str) -> Optional[Book]:
        """Get a book by its moly.hu id"""
        return self.session.query(Book).filter(Book.moly_id == moly_id).first()

    def get_by_alternative_url(self, url: str) -> Optional[Book]:
        """Get the book that lists ``url`` among the URLs of any of its alternatives.

        The JSON column is narrowed with a text search first, then the exact
        membership is checked on the decoded list.
        """
        candidates = (
            self.session.query(BookAlternative)
            .filter(cast(BookAlternative.urls, String).contains(url, autoescape=True))
            .all()
        )
        for alternative in candidates:
            if url in (alternative.urls or []):
                return alternative.book
        return None

    def get_books(self, year: int, genre: Optional[Genre] = None) -> List[Book]:
        """Get the books of a year, optionally limited to one genre, ordered by title"""
        query = (
            self.session.query(Book)
            .options(selectinload(Book.alternatives), selectinload(Book.authors))
            .filter(Book.year == year)
        )
        if genre:
            query = query.filter(Book.genre == Genre(genre).value)
        return query.order_by(Book.title).all()

    def create_book(self, book_data: ScrapedBook) -> Book:
        """Create a book with its alternatives and author links.

        Raises:
            UniqueConstraintError: If a book with the same moly id already exists
        """
        book = Book()
        self._apply_fields(book, book_data)
        book.is_approved = book_data.is_approved
        self.session.add(book)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UniqueConstraintError(
                "A book with this moly id already exists",
                {'moly_id': book_data.moly_id},
            ) from e
        return book

    def replace_book_fields(self, book_id: str, book_data: ScrapedBook) -> Book:
        """Overwrite every scraped field of a book, including alternatives and authors.

        The approval flag is curator-owned and left as it is.
        """
        book = self._get_or_raise(book_id)
        self._apply_fields(book, book_data)
        self.session.commit()
        return book

    def set_book_pending(self, book_id: str, is_pending: bool) -> Book:
        book = self._get_or_raise(book_id)
        book.is_pending = is_pending
        self.session.commit()
        return book

    def _get_or_raise(self, book_id: str) -> Book:
        book = self.get_by_id(book_id)
        if not book:
            raise EntityNotFound("Book not found", {'id': book_id})
        return book

    def _apply_fields(self, book: Book, book_data: ScrapedBook) -> None:
        if book_data.moly_id:
            book.moly_id = book_data.moly_id
        book.title = book_data.title
        book.year = book_data.year
        book.genre = book_data.genre.value if book_data.genre else None
        book.series = book_data.series
        book.series_number = book_data.series_number
        book.is_pending = book_data.is_pending
        book.alternatives = [
            BookAlternative(position=position, name=alternative.name, urls=list(alternative.urls))
            for position, alternative in enumerate(book_data.alternatives)
        ]

        # Reuse existing link rows, their primary key is (book_id, author_id)
        existing = {book_author.author_id: book_author for book_author in book.book_authors}
        book_authors = []
        for author_id in dict.fromkeys(book_data.author_ids):
            book_author = existing.get(author_id) or BookAuthor(author_id=author_id)
            book_author.position = len(book_authors)
            book_authors.append(book_author)
        book.book_authors = book_authors
