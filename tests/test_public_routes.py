"""Public search page tests."""

from fastapi.testclient import TestClient

from lectern.actions.post import create_post
from lectern.routers.search import order_by_hits


def test_home_renders_search_form(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert 'name="q"' in response.text


def test_search_returns_hits_in_index_order(client: TestClient, db, catalog, index) -> None:
    """Hits are hydrated from the DB and keep the index ranking."""
    older = create_post(db, index, text="Pendulum motion", chapter_id=catalog.chapter.id, page=10)
    newer = create_post(db, index, text="Pendulum energy", chapter_id=catalog.chapter.id, page=11)
    create_post(db, index, text="Lenses", chapter_id=catalog.empty_chapter.id)

    response = client.get("/search", params={"q": "pendulum"})

    assert response.status_code == 200
    body = response.text
    assert body.index(f'data-post-id="{newer.id}"') < body.index(f'data-post-id="{older.id}"')
    assert "Lenses" not in body


def test_search_skips_hits_missing_from_db(client: TestClient, db, catalog, index, algolia) -> None:
    """A stale index object with no DB row is simply not shown."""
    post = create_post(db, index, text="Buoyancy", chapter_id=catalog.chapter.id)
    algolia.indices["posts_test"]["999"] = dict(algolia.indices["posts_test"][str(post.id)], objectID="999")

    response = client.get("/search", params={"q": "buoyancy"})

    assert response.status_code == 200
    assert 'data-post-id="999"' not in response.text
    assert f'data-post-id="{post.id}"' in response.text


def test_blank_search_shows_form(client: TestClient, algolia) -> None:
    response = client.get("/search", params={"q": "   "})
    assert response.status_code == 200
    assert algolia.calls == []


def test_search_index_failure(client: TestClient, algolia) -> None:
    algolia.fail_with = ConnectionError("down")
    response = client.get("/search", params={"q": "anything"})
    assert response.status_code == 500
    assert "Something went wrong." in response.text


def test_search_without_algolia_credentials(unconfigured_client: TestClient) -> None:
    """A missing Algolia config renders the generic failure, not a bare 500."""
    response = unconfigured_client.get("/search", params={"q": "anything"})
    assert response.status_code == 500
    assert "Something went wrong." in response.text


def test_post_detail_renders_markdown_and_embed(client: TestClient, db, catalog, index) -> None:
    post = create_post(db, index, text="F = **ma**", chapter_id=catalog.chapter.id, keywords=["newton"])

    response = client.get(f"/posts/{post.id}")

    assert response.status_code == 200
    assert "<strong>ma</strong>" in response.text
    assert "https://example.org/feynman" in response.text
    assert "Physics" in response.text


def test_post_detail_missing(client: TestClient) -> None:
    assert client.get("/posts/12345").status_code == 404


def test_order_by_hits() -> None:
    rows = [{"id": 1}, {"id": 2}, {"id": 3}]
    assert order_by_hits(rows, ["3", "9", "1"]) == [{"id": 3}, {"id": 1}]


def test_templates_expose_asset_helper_only(client: TestClient) -> None:
    from lectern.main import asset, templates

    assert "ASSETS_BASE" not in templates.env.globals
    assert templates.env.globals["asset"] is asset
    assert asset("css/site.css") == "/static/css/site.css"
    assert asset("https://cdn.example.org/a.png") == "https://cdn.example.org/a.png"
