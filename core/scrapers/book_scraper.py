# core/scrapers/book_scraper.py
from bs4 import BeautifulSoup
from typing import Any, Dict, List, Optional
from .base_scraper import BaseScraper
from ..exceptions import ExtractionError
from ..models.moly import AuthorReference, TitleAndSeries
from ..utils.text import remove_invisible_chars

AUTHORS_SELECTOR = '.authors'
AUTHOR_SEPARATOR = ' · '  # middle dot
ORIGINAL_EDITION_HEADING = 'Eredeti mű'
BOOK_SELECTOR_CLASS = 'book_selector'

class BookScraper(BaseScraper):
    """Scrapes a book detail page from moly.hu"""

    async def scrape(self, url: str) -> Dict[str, Any]:
        """
        Get book data from a moly.hu book page
        Expected output:
        {
            'authors': [AuthorReference],
            'title': str,
            'series': str | None,
            'series_number': str | None,
            'original_url': str | None
        }

        Raises:
            FetchError: If the page cannot be downloaded
            ExtractionError: If the author or title block is missing
        """
        self.logger.debug(f"Scraping book: {url}")
        soup = await self.fetch(url)
        return self.extract_data(soup)

    def extract_data(self, soup: BeautifulSoup) -> Dict[str, Any]:
        title = self.extract_title_and_series(soup)
        return {
            'authors': self.extract_authors(soup),
            'title': title.title,
            'series': title.series,
            'series_number': title.series_number,
            'original_url': self.extract_original_edition_url(soup),
        }

    def extract_authors(self, soup: BeautifulSoup) -> List[AuthorReference]:
        """Extract author names and profile links.

        Names are separated by middle dots in the author block, the n-th name
        belongs to the n-th link.
        """
        author_div = soup.select_one(AUTHORS_SELECTOR)
        if not author_div:
            raise ExtractionError("Author block not found on book page")

        text = remove_invisible_chars(author_div.get_text())
        names = [name.strip() for name in text.split(AUTHOR_SEPARATOR) if name.strip()]
        links = author_div.find_all('a')
        if len(links) < len(names):
            raise ExtractionError(
                "Author names and links do not match",
                {'names': names, 'links': len(links)},
            )

        return [
            AuthorReference(name=name, relative_url=links[index].get('href', ''))
            for index, name in enumerate(names)
        ]

    def extract_title_and_series(self, soup: BeautifulSoup) -> TitleAndSeries:
        """Extract the title and, if the book is part of one, the series and its number.

        A title in a series looks like "Title (Series Name 3.)" with the
        parenthesised part being a link to the series page.
        """
        heading = soup.find('h1')
        title_node = heading.find('span') if heading else None
        if not title_node:
            raise ExtractionError("Title block not found on book page")

        text = remove_invisible_chars(title_node.get_text())
        series_link = title_node.find('a')
        if not series_link:
            # Strip the trailing whitespace that separates the title from the rest of the heading
            return TitleAndSeries(title=text.rstrip())

        link_text = remove_invisible_chars(series_link.get_text()).strip()
        title_end = text.rfind(link_text)
        title = text[:title_end] if title_end >= 0 else text
        series_text = link_text.removeprefix('(').removesuffix(')').removesuffix('.')
        words = series_text.split()
        series_number = words.pop() if words else None

        return TitleAndSeries(
            title=title.strip(),
            series=' '.join(words) or None,
            series_number=series_number,
        )

    def extract_original_edition_url(self, soup: BeautifulSoup) -> Optional[str]:
        """Extract the link to the original (untranslated) edition, if the page has one"""
        heading = next(
            (h3 for h3 in soup.find_all('h3') if ORIGINAL_EDITION_HEADING in h3.get_text()),
            None,
        )
        if not heading or not heading.parent:
            return None
        link = heading.parent.find('a', class_=BOOK_SELECTOR_CLASS)
        if not link:
            return None
        return link.get('href')
