# cli/commands/booklist.py
import asyncio
import sys
import click
from typing import Optional
from sqlalchemy.orm import Session

from core.exceptions import SffvektorError
from core.models.moly import Genre
from core.sa.database import get_database
from core.sa.repositories.book import BookRepository
from core.sa.repositories.book_list import BookListRepository
from core.services.book_list_sync import (
    BookListSynchronizer, ErrorPolicy, SyncReport, downloader_from_config, error_policy_from_config
)
from ..utils import print_sync_report, print_sync_start

GENRES = click.Choice([genre.value for genre in Genre])

def _open_session() -> Session:
    db = get_database()
    db.init_db()
    return db.get_session()

@click.group()
def booklist():
    """Book list management commands"""
    pass

@booklist.command()
@click.option('--year', required=True, type=int, help='Year of the book list')
@click.option('--genre', required=True, type=GENRES, help='Genre of the book list')
@click.option('--url', required=True, help='moly.hu list URL')
@click.option('--pending-url', default=None, help='moly.hu shelf URL of the books waiting for a decision')
def add(year: int, genre: str, url: str, pending_url: Optional[str]):
    """Configure the moly.hu list (and pending shelf) of a year and genre

    Example:
        sffvektor booklist add --year 2024 --genre fantasy --url /listak/fantasy-2024
    """
    session = _open_session()
    try:
        BookListRepository(session).create_book_list(year, Genre(genre), url, pending_url)
        click.echo(click.style("Added book list ", fg='green') + click.style(f"{year} {genre}", fg='cyan'))
    except SffvektorError as e:
        click.echo(click.style(f"Error: {e.message}", fg='red'), err=True)
        sys.exit(1)
    finally:
        session.close()

@booklist.command(name='lists')
def list_book_lists():
    """Show the configured book lists"""
    session = _open_session()
    try:
        book_lists = BookListRepository(session).get_book_lists()
        if not book_lists:
            click.echo(click.style("No book lists configured", fg='yellow'))
            return
        for book_list in book_lists:
            line = click.style(f"{book_list.year} {book_list.genre}: ", fg='blue') + click.style(book_list.url, fg='cyan')
            if book_list.pending_url:
                line += click.style(" pending: ", fg='blue') + click.style(book_list.pending_url, fg='cyan')
            click.echo(line)
    finally:
        session.close()

@booklist.command()
@click.option('--year', required=True, type=int, help='Year of the book list')
@click.option('--genre', default=None, type=GENRES, help='Only show books of this genre')
def show(year: int, genre: Optional[str]):
    """Show the stored books of a year"""
    session = _open_session()
    try:
        books = BookRepository(session).get_books(year, Genre(genre) if genre else None)
        if not books:
            click.echo(click.style(f"No books stored for {year}", fg='yellow'))
            return

        for book in books:
            authors = ', '.join(author.display_name for author in book.authors)
            line = click.style(book.title, fg='cyan')
            if book.series:
                line += click.style(f" ({book.series} {book.series_number})", fg='blue')
            line += f" - {authors}"
            if book.is_pending:
                line += click.style(" [pending]", fg='yellow')
            if book.is_approved:
                line += click.style(" [approved]", fg='green')
            click.echo(line)
    finally:
        session.close()

async def _sync(session: Session, year: int, genre: Genre, error_policy: ErrorPolicy,
                concurrency: Optional[int]) -> SyncReport:
    async with downloader_from_config(concurrency) as downloader:
        synchronizer = BookListSynchronizer(session, downloader, error_policy)
        return await synchronizer.sync_book_list(year, genre)

@booklist.command()
@click.option('--year', required=True, type=int, help='Year of the book list')
@click.option('--genre', required=True, type=GENRES, help='Genre of the book list')
@click.option('--continue-on-error', is_flag=True, default=False,
              help='Keep syncing the other books when a book page cannot be scraped')
@click.option('--concurrency', default=None, type=click.IntRange(min=1),
              help='Maximum number of parallel requests to moly.hu')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def sync(year: int, genre: str, continue_on_error: bool, concurrency: Optional[int], verbose: bool):
    """Sync the books of a book list from moly.hu

    Books on the list are created or updated, books on the pending shelf whose
    note mentions the genre are stored as pending. Approved books are only
    moved off the pending shelf, nothing else about them changes.

    Example:
        sffvektor booklist sync --year 2024 --genre fantasy
        sffvektor booklist sync --year 2024 --genre sci-fi --continue-on-error
    """
    session = _open_session()
    try:
        error_policy = ErrorPolicy.CONTINUE if continue_on_error else error_policy_from_config()
        book_list = BookListRepository(session).get_config(year, Genre(genre))
        print_sync_start(year, genre, book_list.url, book_list.pending_url, verbose)

        report = asyncio.run(_sync(session, year, Genre(genre), error_policy, concurrency))
        print_sync_report(report, verbose)
    except SffvektorError as e:
        click.echo("\n" + click.style(f"Error during sync: {e.message}", fg='red'), err=True)
        sys.exit(1)
    finally:
        session.close()

if __name__ == '__main__':
    booklist()
