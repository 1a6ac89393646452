# core/sa/repositories/author.py
from typing import Optional
from sqlalchemy.orm import Session
from ..models import Author

class AuthorRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_name(self, name: str) -> Optional[Author]:
        """Get an author by exact display name (oldest first if there are several)"""
        return (
            self.session.query(Author)
            .filter(Author.display_name == name)
            .order_by(Author.created_at)
            .first()
        )

    def create_author(self, display_name: str, sort_name: str,
                      url: Optional[str] = None, is_approved: bool = False) -> Author:
        author = Author(
            display_name=display_name,
            sort_name=sort_name,
            url=url,
            is_approved=is_approved,
        )
        self.session.add(author)
        self.session.commit()
        return author
