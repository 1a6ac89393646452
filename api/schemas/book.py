# api/schemas/book.py
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict

from core.models.moly import Genre

class AuthorBase(BaseModel):
    id: str
    display_name: str
    sort_name: str
    is_approved: bool

    model_config = ConfigDict(from_attributes=True)

class AlternativeBase(BaseModel):
    name: str
    urls: List[str]

    model_config = ConfigDict(from_attributes=True)

class Book(BaseModel):
    id: str
    moly_id: Optional[str] = None
    title: str
    year: int
    genre: Optional[Genre] = None
    series: Optional[str] = None
    series_number: Optional[str] = None
    is_approved: bool
    is_pending: bool
    alternatives: List[AlternativeBase] = []
    authors: List[AuthorBase] = []

    model_config = ConfigDict(from_attributes=True)

class UpdateFromMolyRequest(BaseModel):
    year: int
    genre: Genre

class FailedBook(BaseModel):
    url: str
    error: str

class SyncReport(BaseModel):
    year: int
    genre: Genre
    created: int
    updated: int
    pending_cleared: int
    unchanged: int
    skipped_shelf: int
    total: int
    failed: List[FailedBook] = []

class ErrorResponse(BaseModel):
    message: str
    code: str
    details: Optional[Any] = None
