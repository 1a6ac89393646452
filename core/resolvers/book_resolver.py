# core/resolvers/book_resolver.py

from typing import List, Optional
from sqlalchemy.orm import Session
from core.models.moly import AlternativeName, AuthorReference, BookAlternative, Genre, ScrapedBook
from core.sa.repositories.author import AuthorRepository
from core.scrapers.book_scraper import BookScraper
from core.utils.http import MolyDownloader
from core.utils.log import get_logger
from core.utils.text import guess_author_sort_name

class BookResolver:
    def __init__(self, session: Session, downloader: MolyDownloader):
        self.downloader = downloader
        self.author_repository = AuthorRepository(session)
        self.book_scraper = BookScraper(downloader)
        self.logger = get_logger(self.__class__.__name__)

    async def resolve_book(self, url: str, year: int, genre: Optional[Genre],
                           moly_id: Optional[str] = None, is_pending: bool = False) -> ScrapedBook:
        """
        Resolves the book data of a moly.hu book page by:
          1. Scraping the page for authors, title, series and the original edition link.
          2. Looking up every author by name, creating the ones that don't exist yet.
          3. Building the alternatives: the Hungarian edition (this page) and,
             when linked, the original edition.

        The book itself is not stored, that is up to the caller.

        Returns:
            A fresh ScrapedBook that can replace whatever is stored for this book.

        Raises:
            FetchError: If the page cannot be downloaded
            ExtractionError: If the page lacks the author or title block
        """
        url = self.downloader.absolute_url(url)
        book_data = await self.book_scraper.scrape(url)

        alternatives = [BookAlternative(name=AlternativeName.HUNGARIAN.value, urls=[url])]
        if book_data['original_url']:
            alternatives.append(BookAlternative(
                name=AlternativeName.ORIGINAL.value,
                urls=[self.downloader.absolute_url(book_data['original_url'])],
            ))

        return ScrapedBook(
            moly_id=moly_id,
            title=book_data['title'],
            year=year,
            genre=genre,
            series=book_data['series'],
            series_number=book_data['series_number'],
            is_approved=False,
            is_pending=is_pending,
            alternatives=alternatives,
            author_ids=self._get_or_create_authors(book_data['authors']),
        )

    def _get_or_create_authors(self, authors: List[AuthorReference]) -> List[str]:
        """Returns the ids of the authors, creating unapproved records for new names"""
        author_ids = []
        for author_data in authors:
            author = self.author_repository.get_by_name(author_data.name)
            if not author:
                author = self.author_repository.create_author(
                    display_name=author_data.name,
                    sort_name=guess_author_sort_name(author_data.name),
                    url=self.downloader.absolute_url(author_data.relative_url),
                    is_approved=False,
                )
                self.logger.info(f"Created author {author.display_name} ({author.sort_name})")
            author_ids.append(author.id)
        return author_ids
