# core/sa/models/book_list.py
from sqlalchemy import String, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin, new_id

class BookList(Base, TimestampMixin):
    """A yearly reading list for one genre, backed by a moly.hu list and an optional pending shelf"""
    __tablename__ = 'book_list'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    genre: Mapped[str] = mapped_column(String(50), nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    pending_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    __table_args__ = (
        UniqueConstraint('year', 'genre', name='uq_book_list_year_genre'),
    )
