from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from castpress.components.listing import ListingProfiles, ListParams, build_list_query
from castpress.domain.entities import Admin, Article, Category, Podcast
from castpress.domain.errors import DuplicateValueError

BASE = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def profiles(rules):
    return ListingProfiles.from_rules(rules.listing)


def article_query(profiles, **params):
    return build_list_query(ListParams(**params), profiles.get("article"), profiles.limits)


def podcast_query(profiles, **params):
    return build_list_query(ListParams(**params), profiles.get("podcast"), profiles.limits)


def make_article(title, offset_days=0, **kwargs):
    kwargs.setdefault("content", f"Body of {title}")
    return Article(title=title, scheduled_date=BASE + timedelta(days=offset_days), **kwargs)


# --- Articles ---


def test_save_and_get_article(article_repo):
    article = make_article(
        "Hello", tags=["Python", "Web"], category="tech", author="Ada", slug="hello"
    )
    article_repo.save(article)

    fetched = article_repo.get_by_id(article.id)
    assert fetched is not None
    assert fetched.title == "Hello"
    assert fetched.tags == ["Python", "Web"]
    assert fetched.scheduled_date == article.scheduled_date
    assert fetched.publish_date is None
    assert article_repo.get_by_slug("hello").id == article.id


def test_update_keeps_created_at(article_repo):
    article = article_repo.save(make_article("Before"))
    created = article.created_at

    article.title = "After"
    article.created_at = BASE
    article_repo.save(article)

    fetched = article_repo.get_by_id(article.id)
    assert fetched.title == "After"
    assert fetched.created_at == created


def test_missing_and_delete(article_repo):
    assert article_repo.get_by_id(uuid4()) is None
    article = article_repo.save(make_article("Gone"))

    assert article_repo.delete(article.id) is True
    assert article_repo.delete(article.id) is False


def test_slug_exists(article_repo):
    article = article_repo.save(make_article("A", slug="taken"))

    assert article_repo.slug_exists("taken") is True
    assert article_repo.slug_exists("taken", exclude_id=article.id) is False
    assert article_repo.slug_exists("free") is False


def test_empty_query_matches_everything(article_repo, profiles):
    for i in range(3):
        article_repo.save(make_article(f"A{i}", i))

    query = article_query(profiles)

    assert article_repo.count(query) == 3
    assert len(article_repo.find(query)) == 3


def test_search_across_title_content_and_tags(article_repo, profiles):
    article_repo.save(make_article("Intro to FastAPI"))
    article_repo.save(make_article("Other", content="all about fastapi internals"))
    article_repo.save(make_article("Tagged", tags=["FastAPI"]))
    article_repo.save(make_article("Unrelated"))

    found = article_repo.find(article_query(profiles, search="FASTAPI"))

    assert {a.title for a in found} == {"Intro to FastAPI", "Other", "Tagged"}


def test_search_underscore_is_literal(article_repo, profiles):
    article_repo.save(make_article("snake_case"))
    article_repo.save(make_article("snakeXcase"))

    found = article_repo.find(article_query(profiles, search="snake_case"))

    assert [a.title for a in found] == ["snake_case"]


def test_search_unicode_case_insensitive(article_repo, profiles):
    article_repo.save(make_article("ÉCOLE du jour"))

    assert article_repo.count(article_query(profiles, search="école")) == 1


def test_tags_filter_case_insensitive_any(article_repo, profiles):
    article_repo.save(make_article("A", tags=["Python"]))
    article_repo.save(make_article("B", tags=["rust", "go"]))
    article_repo.save(make_article("C", tags=["java"]))

    found = article_repo.find(article_query(profiles, tags="PYTHON, Go"))

    assert {a.title for a in found} == {"A", "B"}


def test_category_status_and_author_filters(article_repo, profiles):
    article_repo.save(make_article("A", category="tech", status="published", author="Ada Lovelace"))
    article_repo.save(make_article("B", category="tech", status="draft", author="Ada Lovelace"))
    article_repo.save(make_article("C", category="life", status="published", author="Bob"))

    query = article_query(profiles, category="tech", status="published", author="lovelace")

    assert [a.title for a in article_repo.find(query)] == ["A"]


def test_category_is_exact_match(article_repo, profiles):
    article_repo.save(make_article("A", category="tech"))
    article_repo.save(make_article("B", category="technology"))

    assert article_repo.count(article_query(profiles, category="tech")) == 1


def test_sort_and_pagination(article_repo, profiles):
    for i, title in enumerate(["delta", "alpha", "echo", "charlie", "bravo"]):
        article_repo.save(make_article(title, i))

    by_title = article_query(profiles, sort_by="title", sort_order="asc", limit="2", page="2")
    assert [a.title for a in article_repo.find(by_title)] == ["charlie", "delta"]
    assert article_repo.count(by_title) == 5

    # Default sort: scheduled date, newest first.
    newest = article_query(profiles, limit="2")
    assert [a.title for a in article_repo.find(newest)] == ["bravo", "charlie"]

    last_page = article_query(profiles, limit="2", page="3")
    assert [a.title for a in article_repo.find(last_page)] == ["delta"]


def test_page_past_end_is_empty(article_repo, profiles):
    article_repo.save(make_article("only"))

    query = article_query(profiles, page="50")

    assert article_repo.find(query) == []
    assert article_repo.count(query) == 1


def test_count_by_status(article_repo):
    article_repo.save(make_article("A", status="published"))
    article_repo.save(make_article("B", status="published"))
    article_repo.save(make_article("C"))

    assert article_repo.count_by_status() == {"draft": 1, "published": 2, "archived": 0}


# --- Podcasts ---


def test_podcast_round_trip_and_description_search(podcast_repo, profiles):
    podcast = Podcast(
        title="Episode 1",
        description="We talk about coffee",
        audio_url="/media/podcasts/audio/ep1.mp3",
        duration_seconds=1800,
        spotify="https://open.spotify.com/x",
    )
    podcast_repo.save(podcast)

    fetched = podcast_repo.get_by_id(podcast.id)
    assert fetched.audio_url == "/media/podcasts/audio/ep1.mp3"
    assert fetched.duration_seconds == 1800
    assert fetched.media_urls() == ["/media/podcasts/audio/ep1.mp3"]

    assert podcast_repo.count(podcast_query(profiles, search="COFFEE")) == 1


def test_podcast_sort_by_duration(podcast_repo, profiles):
    for minutes in (30, 10, 20):
        podcast_repo.save(
            Podcast(title=f"{minutes}m", audio_url="/a.mp3", duration_seconds=minutes * 60)
        )

    query = podcast_query(profiles, sort_by="duration", sort_order="asc")

    assert [p.title for p in podcast_repo.find(query)] == ["10m", "20m", "30m"]


def test_podcast_profile_ignores_author(podcast_repo, profiles):
    podcast_repo.save(Podcast(title="P", audio_url="/a.mp3"))

    assert podcast_repo.count(podcast_query(profiles, author="nobody")) == 1


def test_duplicate_slug_raises_domain_error(article_repo):
    article_repo.save(make_article("A", slug="taken"))
    other = article_repo.save(make_article("B"))

    with pytest.raises(DuplicateValueError) as exc:
        article_repo.save(make_article("C", slug="taken"))
    assert exc.value.field == "slug"

    with pytest.raises(DuplicateValueError):
        article_repo.update_fields(other.id, {"slug": "taken"})
    assert article_repo.get_by_id(other.id).slug is None


def test_update_fields_writes_only_named_columns(article_repo):
    article = article_repo.save(make_article("Before", tags=["a"], author="Ada"))
    stamp = BASE + timedelta(days=3)

    assert article_repo.update_fields(
        article.id, {"title": "After", "tags": ["x", "y"], "updated_at": stamp}
    )

    fetched = article_repo.get_by_id(article.id)
    assert fetched.title == "After"
    assert fetched.tags == ["x", "y"]
    assert fetched.updated_at == stamp
    assert fetched.author == "Ada"
    assert fetched.created_at == article.created_at


def test_update_fields_missing_row_and_bad_column(article_repo):
    assert article_repo.update_fields(uuid4(), {"title": "x"}) is False

    article = article_repo.save(make_article("A"))
    with pytest.raises(ValueError):
        article_repo.update_fields(article.id, {"created_at": BASE})
    with pytest.raises(ValueError):
        article_repo.update_fields(article.id, {"title = 'x'; --": 1})


def test_connection_has_dict_rows_and_py_lower(article_repo):
    conn = article_repo._get_conn()
    try:
        row = conn.execute("SELECT py_lower('ÄrTiKeL') AS folded").fetchone()
    finally:
        article_repo._close(conn)

    assert row == {"folded": "ärtikel"}


# --- Categories ---


def test_category_repo(category_repo):
    category_repo.save(Category(name="Tech", slug="tech", type="article"))
    category_repo.save(Category(name="Audio", slug="audio", type="podcast"))
    category_repo.save(Category(name="Mixed", slug="mixed", type="both"))

    assert [c.name for c in category_repo.list_by_type("article")] == ["Mixed", "Tech"]
    assert [c.name for c in category_repo.list_by_type()] == ["Audio", "Mixed", "Tech"]

    tech = category_repo.get_by_name("Tech")
    tech.description = "All things tech"
    category_repo.save(tech)
    assert category_repo.get_by_id(tech.id).description == "All things tech"

    assert category_repo.delete(tech.id) is True
    assert category_repo.get_by_name("Tech") is None


def test_category_duplicate_name_raises_domain_error(category_repo):
    category_repo.save(Category(name="Tech", slug="tech"))

    with pytest.raises(DuplicateValueError) as exc:
        category_repo.save(Category(name="Tech", slug="tech"))
    assert exc.value.field == "name"


# --- Admins ---


def test_admin_repo(admin_repo):
    assert admin_repo.count() == 0
    admin = admin_repo.save(Admin(username="root", password_hash="h", is_super_admin=True))

    fetched = admin_repo.get_by_username("root")
    assert fetched.id == admin.id
    assert fetched.is_super_admin is True
    assert admin_repo.count() == 1

    with pytest.raises(DuplicateValueError):
        admin_repo.save(Admin(username="root", password_hash="other"))

    admin.password_hash = "h2"
    admin_repo.save(admin)
    assert admin_repo.get_by_id(admin.id).password_hash == "h2"

    assert admin_repo.delete(admin.id) is True
    assert admin_repo.get_by_id(admin.id) is None
