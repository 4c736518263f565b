"""Pytest configuration and fixtures."""

import os
from types import SimpleNamespace

# Never touch a developer's database or Algolia app from tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_JSON"] = "0"
for _name in ("ALGOLIA_APP_ID", "ALGOLIA_ADMIN_KEY", "S3_BUCKET", "S3_ENDPOINT", "ASSETS_BASE_URL"):
    os.environ[_name] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

import lectern.models  # noqa: F401
from lectern.db import session as db_session
from lectern.db.base import Base
from lectern.models.book import BookAuthor
from lectern.models.chapter import Chapter
from lectern.models.subject import Subject
from lectern.search.algolia import PostIndex, get_post_index
from lectern.utils import cache


class FakeAlgoliaClient:
    """In-memory stand-in for algoliasearch's SearchClientSync (same call shapes)."""

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, dict]] = {}
        self.calls: list[tuple[str, object]] = []
        self.fail_with: Exception | None = None

    def _index(self, name: str) -> dict[str, dict]:
        if self.fail_with is not None:
            raise self.fail_with
        return self.indices.setdefault(name, {})

    def save_object(self, index_name: str, body: dict) -> None:
        self._index(index_name)[body["objectID"]] = dict(body)
        self.calls.append(("save_object", body["objectID"]))

    def save_objects(self, index_name: str, objects: list[dict]) -> None:
        idx = self._index(index_name)
        for obj in objects:
            idx[obj["objectID"]] = dict(obj)
        self.calls.append(("save_objects", [o["objectID"] for o in objects]))

    def delete_object(self, index_name: str, object_id: str) -> None:
        self._index(index_name).pop(object_id, None)
        self.calls.append(("delete_object", object_id))

    def delete_objects(self, index_name: str, object_ids: list[str]) -> None:
        idx = self._index(index_name)
        for oid in object_ids:
            idx.pop(oid, None)
        self.calls.append(("delete_objects", list(object_ids)))

    def search_single_index(self, index_name: str, search_params: dict):
        query = search_params["query"].lower()
        limit = search_params.get("hitsPerPage", 20)
        hits = []
        for oid, obj in self._index(index_name).items():
            haystack = " ".join(
                [
                    obj.get("text", ""),
                    " ".join(obj.get("keywords", [])),
                    obj["chapter"]["name"],
                    obj["book"]["name"],
                    obj["subject"]["name"],
                ]
            ).lower()
            if query in haystack:
                hits.append(SimpleNamespace(object_id=oid))
        # newest post first, so ranking differs from id order
        hits.sort(key=lambda h: int(h.object_id), reverse=True)
        return SimpleNamespace(hits=hits[:limit])


@pytest.fixture(autouse=True)
def engine():
    """Fresh in-memory schema per test; SessionLocal is rebound to it."""
    eng = db_session.make_engine("sqlite://", poolclass=StaticPool)
    db_session.SessionLocal.configure(bind=eng)
    Base.metadata.create_all(eng)
    cache.clear()
    yield eng
    cache.clear()
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = db_session.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def algolia() -> FakeAlgoliaClient:
    return FakeAlgoliaClient()


@pytest.fixture
def index(algolia: FakeAlgoliaClient) -> PostIndex:
    return PostIndex(algolia, "posts_test")


@pytest.fixture
def client(index: PostIndex):
    """Test client with the search index dependency pointed at the fake."""
    from lectern.main import app

    app.dependency_overrides[get_post_index] = lambda: index
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    """Test client using the real index dependency with no Algolia credentials."""
    from lectern.main import app

    get_post_index.cache_clear()
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    get_post_index.cache_clear()


@pytest.fixture
def catalog(db):
    """Physics → Feynman Lectures → Mechanics, plus an empty second chapter."""
    subject = Subject(name="Physics")
    db.add(subject)
    db.flush()
    book = BookAuthor(name="Feynman Lectures", subject_id=subject.id, embed_url="https://example.org/feynman")
    db.add(book)
    db.flush()
    mechanics = Chapter(name="Mechanics", book_author_id=book.id)
    optics = Chapter(name="Optics", book_author_id=book.id)
    db.add_all([mechanics, optics])
    db.commit()
    return SimpleNamespace(subject=subject, book=book, chapter=mechanics, empty_chapter=optics)
