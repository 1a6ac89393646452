import pytest

from core.exceptions import EntityNotFound, UniqueConstraintError
from core.models.moly import BookAlternative, Genre, ScrapedBook
from core.sa.models import Book
from core.sa.repositories.author import AuthorRepository
from core.sa.repositories.book import BookRepository

@pytest.fixture
def repo(db_session):
    return BookRepository(db_session)

@pytest.fixture
def authors(db_session):
    repo = AuthorRepository(db_session)
    return [
        repo.create_author('Terry Pratchett', 'Pratchett, Terry'),
        repo.create_author('Stephen Baxter', 'Baxter, Stephen'),
    ]

def scraped_book(**overrides) -> ScrapedBook:
    data = {
        'moly_id': '123',
        'title': 'A Hosszú Kozmosz',
        'year': 2024,
        'genre': Genre.SCI_FI,
        'series': 'A Hosszú Föld',
        'series_number': '5',
        'alternatives': [
            BookAlternative(name='magyar', urls=['https://moly.hu/konyvek/a-hosszu-kozmosz']),
            BookAlternative(name='eredeti', urls=['https://moly.hu/konyvek/the-long-cosmos']),
        ],
    }
    data.update(overrides)
    return ScrapedBook(**data)

def test_create_book(repo, authors):
    book = repo.create_book(scraped_book(author_ids=[author.id for author in authors]))

    assert book.id
    assert book.moly_id == '123'
    assert book.genre == 'sci-fi'
    assert book.is_approved is False
    assert book.is_pending is False
    assert [(alt.name, alt.urls) for alt in book.alternatives] == [
        ('magyar', ['https://moly.hu/konyvek/a-hosszu-kozmosz']),
        ('eredeti', ['https://moly.hu/konyvek/the-long-cosmos']),
    ]
    assert [author.display_name for author in book.authors] == ['Terry Pratchett', 'Stephen Baxter']

def test_create_book_with_duplicate_moly_id(repo, db_session):
    repo.create_book(scraped_book())

    with pytest.raises(UniqueConstraintError) as exc_info:
        repo.create_book(scraped_book(title='Másik'))

    assert exc_info.value.details == {'moly_id': '123'}
    # The session is usable after the failed insert
    assert db_session.query(Book).count() == 1

def test_books_without_moly_id_do_not_collide(repo, db_session):
    repo.create_book(scraped_book(moly_id=None))
    repo.create_book(scraped_book(moly_id=None, title='Másik'))
    assert db_session.query(Book).count() == 2

def test_get_by_moly_id(repo):
    created = repo.create_book(scraped_book())

    assert repo.get_by_moly_id('123').id == created.id
    assert repo.get_by_moly_id('124') is None

def test_get_by_alternative_url(repo):
    created = repo.create_book(scraped_book())

    assert repo.get_by_alternative_url('https://moly.hu/konyvek/the-long-cosmos').id == created.id
    assert repo.get_by_alternative_url('https://moly.hu/konyvek/a-hosszu-kozmosz').id == created.id

def test_get_by_alternative_url_needs_exact_match(repo):
    repo.create_book(scraped_book())

    assert repo.get_by_alternative_url('https://moly.hu/konyvek/a-hosszu') is None
    assert repo.get_by_alternative_url('/konyvek/a-hosszu-kozmosz') is None

def test_get_by_alternative_url_with_accents(repo):
    url = 'https://moly.hu/konyvek/jókai-mór_a-kőszívű-ember-fiai'
    created = repo.create_book(scraped_book(alternatives=[BookAlternative(name='magyar', urls=[url])]))

    assert repo.get_by_alternative_url(url).id == created.id

def test_replace_book_fields(repo, authors):
    book = repo.create_book(scraped_book(author_ids=[authors[0].id], is_pending=True))

    updated = repo.replace_book_fields(book.id, scraped_book(
        title='The Long Cosmos',
        genre=Genre.FANTASY,
        series=None,
        series_number=None,
        is_pending=False,
        alternatives=[BookAlternative(name='magyar', urls=['https://moly.hu/konyvek/uj'])],
        author_ids=[authors[1].id, authors[0].id],
    ))

    assert updated.id == book.id
    assert updated.title == 'The Long Cosmos'
    assert updated.genre == 'fantasy'
    assert updated.series is None
    assert updated.is_pending is False
    assert [alt.urls for alt in updated.alternatives] == [['https://moly.hu/konyvek/uj']]
    assert updated.author_ids == [authors[1].id, authors[0].id]
    assert [author.display_name for author in updated.authors] == ['Stephen Baxter', 'Terry Pratchett']

def test_replace_keeps_moly_id_when_unknown(repo):
    book = repo.create_book(scraped_book())
    updated = repo.replace_book_fields(book.id, scraped_book(moly_id=None, title='Új cím'))
    assert updated.moly_id == '123'

def test_replace_book_fields_dedupes_authors(repo, authors):
    book = repo.create_book(scraped_book())
    author_id = authors[0].id

    updated = repo.replace_book_fields(book.id, scraped_book(author_ids=[author_id, author_id]))

    assert updated.author_ids == [author_id]

def test_replace_leaves_approval_alone(repo, db_session):
    book = repo.create_book(scraped_book())
    book.is_approved = True
    db_session.commit()

    assert repo.replace_book_fields(book.id, scraped_book(is_approved=False)).is_approved is True

def test_set_book_pending(repo):
    book = repo.create_book(scraped_book(is_pending=True))
    assert repo.set_book_pending(book.id, False).is_pending is False

def test_missing_book(repo):
    with pytest.raises(EntityNotFound):
        repo.set_book_pending('nincs', False)
    with pytest.raises(EntityNotFound):
        repo.replace_book_fields('nincs', scraped_book())

def test_get_books(repo):
    repo.create_book(scraped_book(moly_id='1', title='Solaris', genre=Genre.SCI_FI))
    repo.create_book(scraped_book(moly_id='2', title='A Gyűrűk Ura', genre=Genre.FANTASY))
    repo.create_book(scraped_book(moly_id='3', title='Dűne', genre=Genre.SCI_FI, year=2023))

    assert [book.title for book in repo.get_books(2024)] == ['A Gyűrűk Ura', 'Solaris']
    assert [book.title for book in repo.get_books(2024, Genre.SCI_FI)] == ['Solaris']
    assert [book.title for book in repo.get_books(2023, 'sci-fi')] == ['Dűne']
