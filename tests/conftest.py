# tests/conftest.py
import asyncio
import sys
from pathlib import Path
from typing import Dict, List

import httpx
import pytest

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.models.moly import Genre
from core.sa.database import Database
from core.sa.repositories.book_list import BookListRepository
from core.utils.http import MolyDownloader, RetryPolicy

FIXTURES_DIR = Path(__file__).parent / 'fixtures'

def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding='utf-8')

class FakeMoly:
    """Serves canned moly.hu pages to an httpx.MockTransport.

    Pages are keyed by path including the query string. Status codes queued
    for a path are returned (one per request) before the page itself, queued
    connection failures are raised before anything else.
    """

    def __init__(self):
        self.pages: Dict[str, str] = {}
        self.statuses: Dict[str, List[int]] = {}
        self.connect_errors: Dict[str, int] = {}
        self.book_page = None
        self.requests: List[str] = []

    def add_page(self, path: str, html: str) -> None:
        self.pages[path] = html

    def fail_with(self, path: str, *status_codes: int) -> None:
        self.statuses.setdefault(path, []).extend(status_codes)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode('ascii')
        self.requests.append(path)

        if self.connect_errors.get(path):
            self.connect_errors[path] -= 1
            raise httpx.ConnectError("connection refused", request=request)
        if self.statuses.get(path):
            return httpx.Response(self.statuses[path].pop(0))
        if path in self.pages:
            return httpx.Response(200, text=self.pages[path])
        if self.book_page is not None and path.startswith('/konyvek/'):
            return httpx.Response(200, text=self.book_page)
        return httpx.Response(404)

@pytest.fixture
def page_html():
    """Loader for the HTML pages under tests/fixtures"""
    return load_fixture

@pytest.fixture
def fake_moly():
    return FakeMoly()

@pytest.fixture
def moly_site(fake_moly):
    """The list, shelf and book pages of a fantasy book list for 2024"""
    fake_moly.add_page('/lista/123', load_fixture('list_page_1.html'))
    fake_moly.add_page('/lista/123?page=2', load_fixture('list_page_2.html'))
    fake_moly.add_page('/polc/123', load_fixture('shelf_page_1.html'))
    fake_moly.add_page('/polc/123?page=2', load_fixture('shelf_page_2.html'))
    fake_moly.book_page = load_fixture('book_simple.html')
    return fake_moly

@pytest.fixture
def retry_policy():
    return RetryPolicy(retries=2, no_response_retries=2, delay=0)

@pytest.fixture
def downloader(fake_moly, retry_policy):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_moly.handler))
    yield MolyDownloader(retry_policy=retry_policy, client=client)
    asyncio.run(client.aclose())

@pytest.fixture
def database():
    """Fresh in-memory database per test"""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.engine.dispose()

@pytest.fixture
def db_session(database):
    session = database.get_session()
    yield session
    session.close()

@pytest.fixture
def fantasy_list(db_session):
    return BookListRepository(db_session).create_book_list(
        2024, Genre.FANTASY, '/lista/123', pending_url='/polc/123'
    )
