# core/scrapers/base_scraper.py

from typing import Generic, List, TypeVar
from bs4 import BeautifulSoup
from ..utils.http import MolyDownloader
from ..utils.log import get_logger
from ..utils.tasks import gather_or_cancel

# moly.hu pagination: every page link plus a trailing "next page" control
PAGINATION_SELECTOR = '.pagination'

T = TypeVar('T')

def extract_pagination_links(soup: BeautifulSoup) -> List[str]:
    """
    Extract the links of the other pages of a paginated listing.

    Args:
        soup: The parsed first page

    Returns:
        Page hrefs in document order, without the final "next" link.
        Empty if the page has no pagination block.
    """
    paginator = soup.select_one(PAGINATION_SELECTOR)
    if not paginator:
        return []
    links = [link.get('href') for link in paginator.find_all('a')]
    # The last link is "Következő" (next), not a page of its own
    return [href for href in links[:-1] if href]

class BaseScraper(Generic[T]):
    """Base class for moly.hu scrapers providing download, parsing and pagination."""

    def __init__(self, downloader: MolyDownloader):
        """
        Initialize the base scraper.

        Args:
            downloader: Shared downloader used for every request
        """
        self.downloader = downloader
        self.logger = get_logger(self.__class__.__name__)

    def parse_html(self, html: str) -> BeautifulSoup:
        """Parse HTML content into a BeautifulSoup object."""
        return BeautifulSoup(html, 'html.parser')

    async def fetch(self, url: str) -> BeautifulSoup:
        """Download and parse one page."""
        html = await self.downloader.download_url(url)
        return self.parse_html(html)

    def extract_page_data(self, soup: BeautifulSoup) -> List[T]:
        """
        Extract items from a single page.
        Default implementation returns an empty list.
        Should be overridden by paginated scrapers.

        Args:
            soup: The parsed HTML

        Returns:
            List of items from the page
        """
        return []

    async def scrape_paginated(self, url: str) -> List[T]:
        """
        Scrape every page of a paginated listing.

        The first page is downloaded to discover the other pages, which are then
        downloaded concurrently. Items keep page order regardless of which
        download finishes first. A page that cannot be downloaded fails the
        whole scrape, a partial listing is never returned.

        Args:
            url: URL of the first page

        Returns:
            Items of all pages, first page first
        """
        soup = await self.fetch(url)
        items = self.extract_page_data(soup)
        other_pages = extract_pagination_links(soup)

        if other_pages:
            self.logger.info(f"Found {len(other_pages)} more pages for {url}")
            pages = await gather_or_cancel(self.fetch(page_url) for page_url in other_pages)
            for page in pages:
                items.extend(self.extract_page_data(page))

        self.logger.info(f"Found {len(items)} items on {len(other_pages) + 1} pages of {url}")
        return items
