# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Book, Author, BookAuthor, BookAlternative, BookList
)

__all__ = [
    'Database',
    'Base',
    'Book',
    'Author',
    'BookAuthor',
    'BookAlternative',
    'BookList',
]
