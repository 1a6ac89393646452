# core/sa/models/author.py
from sqlalchemy import String, Boolean, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id

class Author(Base, TimestampMixin):
    __tablename__ = 'author'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    book_authors = relationship('BookAuthor', back_populates='author')

    __table_args__ = (
        Index('idx_author_display_name', 'display_name'),
        Index('idx_author_sort_name', 'sort_name'),
    )
