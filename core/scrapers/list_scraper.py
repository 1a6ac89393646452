# core/scrapers/list_scraper.py
from bs4 import BeautifulSoup
from typing import List
from .base_scraper import BaseScraper
from ..models.moly import BookReference, ShelfReference

BOOK_CARD_SELECTOR = '.book_atom'
SHELF_ITEM_SELECTOR = '.tale_item'
SHELF_NOTE_SELECTOR = '.sticky_note'

def _book_card_link(card):
    """First anchor of a book card, it carries the URL and the moly id"""
    return card.find('a') if card else None

class ListScraper(BaseScraper[BookReference]):
    """Scraper for moly.hu book lists."""

    def extract_page_data(self, soup: BeautifulSoup) -> List[BookReference]:
        """Extract book references from a list page"""
        books = []
        for card in soup.select(BOOK_CARD_SELECTOR):
            link = _book_card_link(card)
            if not link or not link.get('href'):
                self.logger.warning("Skipping book card without a link")
                continue
            books.append(BookReference(
                relative_url=link['href'],
                moly_id=link.get('data-id'),
            ))
        return books

class ShelfScraper(BaseScraper[ShelfReference]):
    """Scraper for moly.hu shelves, where curators park books with a note about their genre."""

    def extract_page_data(self, soup: BeautifulSoup) -> List[ShelfReference]:
        """Extract book references and their notes from a shelf page.

        Shelf items without a book card are skipped.
        """
        books = []
        for item in soup.select(SHELF_ITEM_SELECTOR):
            link = _book_card_link(item.select_one(BOOK_CARD_SELECTOR))
            if not link or not link.get('href'):
                continue
            note = item.select_one(SHELF_NOTE_SELECTOR)
            books.append(ShelfReference(
                relative_url=link['href'],
                moly_id=link.get('data-id'),
                note=note.get_text() if note else None,
            ))
        return books
