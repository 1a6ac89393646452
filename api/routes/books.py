# api/routes/books.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.dependencies import get_downloader, get_error_policy
from api.schemas.book import Book, ErrorResponse, SyncReport, UpdateFromMolyRequest
from core.models.moly import Genre
from core.sa.database import get_db
from core.sa.repositories.book import BookRepository
from core.services.book_list_sync import BookListSynchronizer, ErrorPolicy
from core.utils.http import MolyDownloader

router = APIRouter(prefix="/books", tags=["books"])

@router.get("", response_model=List[Book])
def get_books(
    year: int = Query(..., description="Book list year"),
    genre: Optional[Genre] = Query(None, description="Limit to one genre"),
    db: Session = Depends(get_db)
):
    """
    Get the books of a year, ordered by title.

    Args:
        year: Book list year
        genre: Optional genre filter
        db: Database session
    """
    return BookRepository(db).get_books(year, genre)

@router.post(
    "/update-from-moly",
    response_model=SyncReport,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update_from_moly(
    body: UpdateFromMolyRequest,
    db: Session = Depends(get_db),
    downloader: MolyDownloader = Depends(get_downloader),
    error_policy: ErrorPolicy = Depends(get_error_policy),
):
    """
    Sync the book list of a year and genre from moly.hu.

    Returns the counts of created, updated and unchanged books. Responds with
    404 if no book list is configured for the year and genre.
    """
    synchronizer = BookListSynchronizer(db, downloader, error_policy)
    report = await synchronizer.sync_book_list(body.year, body.genre)
    return SyncReport(**report.to_dict())
