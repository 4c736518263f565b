"""Search index adapter and sync webhook tests."""

import pytest

from lectern.models.post import Post
from lectern.webhooks.save_index import (
    delete_index,
    delete_many_indices,
    save_index,
    save_indices,
    save_many_indices,
)


def _post(db, chapter_id: int, text: str) -> Post:
    post = Post(text=text, chapter_id=chapter_id, keywords=[])
    db.add(post)
    db.commit()
    return post


def test_save_index_pushes_denormalized_record(db, catalog, index, algolia) -> None:
    """save_index re-reads the post and stores it under its id."""
    post = _post(db, catalog.chapter.id, "Inertia")

    save_index(db, index, post.id)

    stored = algolia.indices["posts_test"][str(post.id)]
    assert stored["text"] == "Inertia"
    assert stored["chapter"]["name"] == "Mechanics"


def test_saving_same_post_twice_is_idempotent(db, catalog, index, algolia) -> None:
    """A second save replaces the record; no duplicate objects appear."""
    post = _post(db, catalog.chapter.id, "draft")
    save_index(db, index, post.id)

    post.text = "final"
    db.commit()
    save_index(db, index, post.id)

    objects = algolia.indices["posts_test"]
    assert list(objects) == [str(post.id)]
    assert objects[str(post.id)]["text"] == "final"


def test_save_index_missing_post_raises(db, catalog, index, algolia) -> None:
    """There is nothing to push for an unknown id; the caller sees the error."""
    with pytest.raises(LookupError):
        save_index(db, index, 777)
    assert algolia.calls == []


def test_save_index_propagates_client_errors(db, catalog, index, algolia) -> None:
    """Index failures are not caught or retried."""
    post = _post(db, catalog.chapter.id, "x")
    algolia.fail_with = ConnectionError("algolia down")

    with pytest.raises(ConnectionError):
        save_index(db, index, post.id)


def test_delete_index_removes_object(db, catalog, index, algolia) -> None:
    """Deleting drops the object; searching no longer finds it."""
    post = _post(db, catalog.chapter.id, "Gravity")
    save_index(db, index, post.id)
    assert index.search("gravity") == [str(post.id)]

    delete_index(index, post.id)

    assert str(post.id) not in algolia.indices["posts_test"]
    assert index.search("gravity") == []


def test_delete_unknown_object_is_success(index, algolia) -> None:
    """Removing an id the index never had is not an error."""
    delete_index(index, 31337)
    assert algolia.calls == [("delete_object", "31337")]


def test_save_many_and_delete_many(db, catalog, index, algolia) -> None:
    """Bulk push every post, then bulk remove a subset."""
    posts = [_post(db, catalog.chapter.id, f"note {i}") for i in range(3)]

    assert save_many_indices(db, index) == 3
    assert sorted(algolia.indices["posts_test"]) == sorted(str(p.id) for p in posts)

    assert delete_many_indices(index, [posts[0].id, posts[1].id]) == 2
    assert list(algolia.indices["posts_test"]) == [str(posts[2].id)]


def test_save_indices_only_sends_known_posts(db, catalog, index, algolia) -> None:
    """Targeted re-push skips ids that no longer exist."""
    post = _post(db, catalog.chapter.id, "kept")

    assert save_indices(db, index, [post.id, 5000]) == 1
    assert list(algolia.indices["posts_test"]) == [str(post.id)]


def test_empty_batches_make_no_calls(db, index, algolia) -> None:
    """Nothing to send means no request to the index."""
    assert save_many_indices(db, index) == 0
    assert delete_many_indices(index, []) == 0
    assert algolia.calls == []


def test_get_post_index_requires_credentials() -> None:
    """Without Algolia credentials the adapter refuses to connect on first use."""
    from lectern.search.algolia import get_post_index

    get_post_index.cache_clear()
    unconfigured = get_post_index()
    with pytest.raises(RuntimeError):
        unconfigured.search("anything")
    with pytest.raises(RuntimeError):
        unconfigured.save_object({"objectID": "1"})
    get_post_index.cache_clear()


def test_search_returns_ids_in_ranking_order(db, catalog, index) -> None:
    first = _post(db, catalog.chapter.id, "wave optics")
    second = _post(db, catalog.chapter.id, "wave mechanics")
    save_many_indices(db, index)

    assert index.search("wave") == [str(second.id), str(first.id)]
    assert index.search("wave", hits_per_page=1) == [str(second.id)]
