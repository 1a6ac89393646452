from .book import BookRepository
from .author import AuthorRepository
from .book_list import BookListRepository

__all__ = ['BookRepository', 'AuthorRepository', 'BookListRepository']
