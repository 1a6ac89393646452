# core/services/book_list_sync.py

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union
from sqlalchemy.orm import Session

from core import config
from core.exceptions import ExtractionError
from core.models.moly import BookReference, Genre, ShelfReference
from core.resolvers.book_creator import BookCreator, UpsertAction
from core.resolvers.book_resolver import BookResolver
from core.sa.repositories.book_list import BookListRepository
from core.scrapers.list_scraper import ListScraper, ShelfScraper
from core.utils.http import MolyDownloader
from core.utils.log import get_logger
from core.utils.tasks import gather_or_cancel

class ErrorPolicy(str, Enum):
    """What a sync run does when a single book cannot be scraped"""
    FAIL_FAST = "fail_fast"  # abort the run, nothing partial is reported as done
    CONTINUE = "continue"    # record the failure and carry on with the other books

def error_policy_from_config() -> ErrorPolicy:
    """The policy named by SYNC_ERROR_POLICY"""
    name = config.error_policy_name()
    try:
        return ErrorPolicy(name)
    except ValueError:
        raise ValueError(f"SYNC_ERROR_POLICY must be one of 'fail_fast', 'continue', got {name!r}")

def downloader_from_config(max_concurrency: Optional[int] = None) -> MolyDownloader:
    """Build a downloader from the MOLY_* settings. The caller owns it and must close it."""
    return MolyDownloader(
        base_url=config.moly_base_url(),
        retry_policy=config.retry_policy(),
        max_concurrency=max_concurrency or config.max_concurrency(),
        timeout=config.http_timeout(),
    )

@dataclass
class SyncReport:
    year: int
    genre: Genre
    created: int = 0
    updated: int = 0
    pending_cleared: int = 0
    unchanged: int = 0
    skipped_shelf: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)

    def record(self, action: UpsertAction) -> None:
        if action is UpsertAction.CREATED:
            self.created += 1
        elif action is UpsertAction.UPDATED:
            self.updated += 1
        elif action is UpsertAction.PENDING_CLEARED:
            self.pending_cleared += 1
        else:
            self.unchanged += 1

    @property
    def total(self) -> int:
        return self.created + self.updated + self.pending_cleared + self.unchanged

    def to_dict(self) -> dict:
        return {
            'year': self.year,
            'genre': self.genre.value,
            'created': self.created,
            'updated': self.updated,
            'pending_cleared': self.pending_cleared,
            'unchanged': self.unchanged,
            'skipped_shelf': self.skipped_shelf,
            'total': self.total,
            'failed': [{'url': url, 'error': error} for url, error in self.failed],
        }

class BookListSynchronizer:
    """Brings the books of a configured book list in line with its moly.hu list and pending shelf."""

    def __init__(self, session: Session, downloader: MolyDownloader,
                 error_policy: ErrorPolicy = ErrorPolicy.FAIL_FAST):
        """
        Args:
            session: SQLAlchemy session
            downloader: Downloader shared by every scraper of the run
            error_policy: How to handle a book whose page cannot be scraped
        """
        self.error_policy = ErrorPolicy(error_policy)
        self.book_list_repository = BookListRepository(session)
        self.list_scraper = ListScraper(downloader)
        self.shelf_scraper = ShelfScraper(downloader)
        self.resolver = BookResolver(session, downloader)
        self.creator = BookCreator(session)
        self.logger = get_logger(self.__class__.__name__)

    async def sync_book_list(self, year: int, genre: Union[Genre, str]) -> SyncReport:
        """
        Create or update the books of the list configured for year and genre.

        Books of the main list are stored as not pending. Books of the pending
        shelf are only taken if their note mentions the genre, and are stored
        as pending.

        Raises:
            EntityNotFound: If no book list is configured for year and genre
            FetchError: If a listing page (or, with FAIL_FAST, a book page) cannot be downloaded
            ExtractionError: With FAIL_FAST, if a book page lacks required markup
        """
        genre = Genre(genre)
        book_list = self.book_list_repository.get_config(year, genre)
        report = SyncReport(year=year, genre=genre)
        self.logger.info(f"Syncing book list {year} {genre.value} from {book_list.url}")

        list_books = await self.list_scraper.scrape_paginated(book_list.url)
        await self._sync_books(list_books, report, is_pending=False)

        if book_list.pending_url:
            shelf_books = await self.shelf_scraper.scrape_paginated(book_list.pending_url)
            pending_books = [book for book in shelf_books if book.matches_genre(genre)]
            report.skipped_shelf = len(shelf_books) - len(pending_books)
            self.logger.info(f"{len(pending_books)} of {len(shelf_books)} pending books are {genre.value}")
            await self._sync_books(pending_books, report, is_pending=True)

        self.logger.info(
            f"Books updated for list {year} {genre.value}: {report.created} created, "
            f"{report.updated} updated, {report.pending_cleared} no longer pending, "
            f"{report.unchanged} unchanged, {len(report.failed)} failed"
        )
        return report

    async def _sync_books(self, references: Sequence[BookReference], report: SyncReport,
                          is_pending: bool) -> None:
        coroutines = [self._sync_book(reference, report.year, report.genre, is_pending) for reference in references]

        if self.error_policy is ErrorPolicy.FAIL_FAST:
            for action in await gather_or_cancel(coroutines):
                report.record(action)
            return

        results = await asyncio.gather(*coroutines, return_exceptions=True)
        for reference, result in zip(references, results):
            if isinstance(result, Exception):
                self.logger.error(f"Failed to sync book {reference.relative_url}: {result}")
                report.failed.append((reference.relative_url, str(result)))
            elif isinstance(result, BaseException):
                raise result
            else:
                report.record(result)

    async def _sync_book(self, reference: Union[BookReference, ShelfReference], year: int,
                         genre: Genre, is_pending: bool) -> UpsertAction:
        try:
            book_data = await self.resolver.resolve_book(
                reference.relative_url, year, genre, reference.moly_id, is_pending
            )
        except ExtractionError as e:
            raise ExtractionError(
                f"Failed to get book details from {reference.relative_url}: {e.message}",
                {'url': reference.relative_url, 'details': e.details},
            ) from e
        _, action = self.creator.create_or_update(book_data)
        return action
