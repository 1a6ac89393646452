# core/sa/models/__init__.py
from .base import Base, TimestampMixin
from .author import Author
from .book import Book, BookAuthor, BookAlternative
from .book_list import BookList

__all__ = [
    'Base',
    'TimestampMixin',
    'Author',
    'Book',
    'BookAuthor',
    'BookAlternative',
    'BookList',
]
