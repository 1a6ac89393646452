# core/sa/models/book.py
from sqlalchemy import String, Integer, Boolean, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id

class BookAuthor(Base, TimestampMixin):
    __tablename__ = 'book_author'

    book_id: Mapped[str] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), primary_key=True)
    author_id: Mapped[str] = mapped_column(ForeignKey('author.id'), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    book = relationship('Book', back_populates='book_authors')
    author = relationship('Author', back_populates='book_authors')

class BookAlternative(Base, TimestampMixin):
    """An edition of a book, e.g. the Hungarian translation ('magyar') or the original ('eredeti')"""
    __tablename__ = 'book_alternative'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[str] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    book = relationship('Book', back_populates='alternatives')

    __table_args__ = (
        Index('idx_book_alternative_book_id', 'book_id'),
    )

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    moly_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    genre: Mapped[str | None] = mapped_column(String(50), nullable=True)
    series: Mapped[str | None] = mapped_column(String(500), nullable=True)
    series_number: Mapped[str | None] = mapped_column(String(50), nullable=True)  # "3", "1.5", "I" etc.
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_pending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    alternatives = relationship(
        'BookAlternative',
        back_populates='book',
        cascade='all, delete-orphan',
        order_by='BookAlternative.position',
    )
    book_authors = relationship(
        'BookAuthor',
        back_populates='book',
        cascade='all, delete-orphan',
        order_by='BookAuthor.position',
    )

    # Convenience relationship
    authors = relationship('Author', secondary='book_author', viewonly=True, order_by='BookAuthor.position')

    @property
    def author_ids(self) -> list[str]:
        return [book_author.author_id for book_author in self.book_authors]

    __table_args__ = (
        Index('idx_book_year_genre', 'year', 'genre'),
    )
