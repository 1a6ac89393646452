# core/sa/repositories/book_list.py
from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..models import BookList
from ...exceptions import EntityNotFound, UniqueConstraintError
from ...models.moly import Genre

class BookListRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, year: int, genre: Genre) -> Optional[BookList]:
        return (
            self.session.query(BookList)
            .filter(BookList.year == year, BookList.genre == Genre(genre).value)
            .first()
        )

    def get_config(self, year: int, genre: Genre) -> BookList:
        """Get the list configuration for a year and genre.

        Raises:
            EntityNotFound: If no list is configured
        """
        book_list = self.get(year, genre)
        if not book_list:
            raise EntityNotFound("Booklist does not exist", {'year': year, 'genre': Genre(genre).value})
        return book_list

    def get_book_lists(self) -> List[BookList]:
        return self.session.query(BookList).order_by(BookList.year.desc(), BookList.genre).all()

    def create_book_list(self, year: int, genre: Genre, url: str,
                         pending_url: Optional[str] = None) -> BookList:
        book_list = BookList(year=year, genre=Genre(genre).value, url=url, pending_url=pending_url)
        self.session.add(book_list)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UniqueConstraintError(
                "A book list already exists for this year and genre",
                {'year': year, 'genre': Genre(genre).value},
            ) from e
        return book_list
