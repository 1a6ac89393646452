# core/models/moly.py

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

class Genre(str, Enum):
    FANTASY = "fantasy"
    SCI_FI = "sci-fi"

class AlternativeName(str, Enum):
    HUNGARIAN = "magyar"
    ORIGINAL = "eredeti"

class BookReference(BaseModel):
    """A book card found on a list page"""
    model_config = ConfigDict(frozen=True)

    relative_url: str
    moly_id: Optional[str] = None

class ShelfReference(BookReference):
    """A book on a pending shelf together with the curator's note"""
    note: Optional[str] = None

    def matches_genre(self, genre: Genre) -> bool:
        return bool(self.note) and genre.value in self.note

class AuthorReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    relative_url: str

class TitleAndSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    series: Optional[str] = None
    series_number: Optional[str] = None

class BookAlternative(BaseModel):
    """One edition of a book (e.g. the Hungarian translation) and where to find it"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    name: str
    urls: List[str]

class ScrapedBook(BaseModel):
    """Canonical book built from one detail page; a full replacement candidate"""
    model_config = ConfigDict(frozen=True)

    moly_id: Optional[str] = None
    title: str
    year: int
    genre: Optional[Genre] = None
    series: Optional[str] = None
    series_number: Optional[str] = None
    is_approved: bool = False
    is_pending: bool = False
    alternatives: List[BookAlternative] = Field(default_factory=list)
    author_ids: List[str] = Field(default_factory=list)

    @property
    def url(self) -> Optional[str]:
        """Detail page URL of the Hungarian edition, used for matching when there is no moly id"""
        for alternative in self.alternatives:
            if alternative.name == AlternativeName.HUNGARIAN.value and alternative.urls:
                return alternative.urls[0]
        return None
