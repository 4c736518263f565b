"""Server action tests: DB writes followed by index sync."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from lectern.actions.catalog import (
    create_book,
    create_subject,
    delete_book,
    delete_subject,
    update_book,
    update_subject,
)
from lectern.actions.chapter import create_chapter, delete_chapter, update_chapter
from lectern.actions.post import create_post, delete_post, delete_posts, update_post
from lectern.models.chapter import Chapter
from lectern.models.post import Post
from lectern.services.post import get_post_by_id
from lectern.services.subject import get_subjects


def test_create_post_writes_and_indexes(db, catalog, index, algolia) -> None:
    """Creating a post stores it and pushes the denormalized record."""
    post = create_post(db, index, text="Work", chapter_id=catalog.chapter.id, page=4, keywords=["energy"])

    fetched = get_post_by_id(db, post.id)
    assert fetched["chapter"]["name"] == "Mechanics"
    assert fetched["book"]["name"] == "Feynman Lectures"
    assert fetched["subject"]["name"] == "Physics"
    assert algolia.indices["posts_test"][str(post.id)]["keywords"] == ["energy"]


def test_update_post_reindexes(db, catalog, index, algolia) -> None:
    """Moving a post to another chapter updates the index record."""
    post = create_post(db, index, text="Light", chapter_id=catalog.chapter.id)

    update_post(db, index, post.id, text="Light", chapter_id=catalog.empty_chapter.id, keywords=["waves"])

    stored = algolia.indices["posts_test"][str(post.id)]
    assert stored["chapter"]["name"] == "Optics"
    assert stored["keywords"] == ["waves"]


def test_update_missing_post_returns_none(db, catalog, index, algolia) -> None:
    """Absent posts are reported to the caller, not synced."""
    assert update_post(db, index, 404, text="x", chapter_id=catalog.chapter.id) is None
    assert algolia.calls == []


def test_create_post_with_unknown_chapter_fails(db, catalog, index, algolia) -> None:
    """The FK rejects the row; nothing reaches the index."""
    with pytest.raises(IntegrityError):
        create_post(db, index, text="orphan", chapter_id=9999)
    assert algolia.calls == []
    assert db.scalar(select(func.count(Post.id))) == 0


def test_delete_post_removes_row_and_object(db, catalog, index, algolia) -> None:
    """After delete the post is gone from both stores."""
    post = create_post(db, index, text="Friction", chapter_id=catalog.chapter.id)

    assert delete_post(db, index, post.id) is True

    assert get_post_by_id(db, post.id) is None
    assert str(post.id) not in algolia.indices["posts_test"]
    assert index.search("friction") == []


def test_delete_missing_post(db, catalog, index) -> None:
    assert delete_post(db, index, 123) is False


def test_delete_posts_bulk(db, catalog, index, algolia) -> None:
    """Bulk delete removes only ids that existed."""
    a = create_post(db, index, text="a", chapter_id=catalog.chapter.id)
    b = create_post(db, index, text="b", chapter_id=catalog.chapter.id)
    c = create_post(db, index, text="c", chapter_id=catalog.chapter.id)

    assert delete_posts(db, index, [a.id, c.id, 999]) == 2

    assert list(algolia.indices["posts_test"]) == [str(b.id)]
    assert algolia.calls[-1] == ("delete_objects", [str(a.id), str(c.id)])
    assert delete_posts(db, index, []) == 0


def test_delete_chapter_with_posts_fails_and_changes_nothing(db, catalog, index) -> None:
    """A chapter still referenced by posts cannot be deleted."""
    post = create_post(db, index, text="Kepler", chapter_id=catalog.chapter.id)

    with pytest.raises(IntegrityError):
        delete_chapter(db, catalog.chapter.id)

    db.expire_all()
    assert db.get(Chapter, catalog.chapter.id) is not None
    assert get_post_by_id(db, post.id)["chapter"]["id"] == catalog.chapter.id


def test_delete_empty_chapter(db, catalog) -> None:
    assert delete_chapter(db, catalog.empty_chapter.id) is True
    assert db.get(Chapter, catalog.empty_chapter.id) is None
    assert delete_chapter(db, catalog.empty_chapter.id) is False


def test_update_chapter_resyncs_its_posts(db, catalog, index, algolia) -> None:
    """Renaming a chapter rewrites the chapter name on every indexed post."""
    post = create_post(db, index, text="Orbits", chapter_id=catalog.chapter.id)
    create_chapter(db, name="  Waves ", book_author_id=catalog.book.id)

    update_chapter(db, index, catalog.chapter.id, name="Classical Mechanics", book_author_id=catalog.book.id)

    assert algolia.indices["posts_test"][str(post.id)]["chapter"]["name"] == "Classical Mechanics"
    assert algolia.calls[-1] == ("save_objects", [str(post.id)])


def test_subject_actions_revalidate_cached_subjects(db, catalog, index) -> None:
    """Subject list is cached, and subject mutations drop the cache."""
    assert [s["name"] for s in get_subjects()] == ["Physics"]

    chem = create_subject(db, name="Chemistry")
    assert [s["name"] for s in get_subjects()] == ["Chemistry", "Physics"]

    update_subject(db, index, chem.id, name="Organic Chemistry")
    assert [s["name"] for s in get_subjects()] == ["Organic Chemistry", "Physics"]

    delete_subject(db, chem.id)
    assert [s["name"] for s in get_subjects()] == ["Physics"]


def test_rename_subject_and_book_resync_posts(db, catalog, index, algolia) -> None:
    """Ancestor renames flow into the denormalized index records."""
    post = create_post(db, index, text="Torque", chapter_id=catalog.chapter.id)

    update_subject(db, index, catalog.subject.id, name="Classical Physics")
    update_book(db, index, catalog.book.id, name="Lectures Vol. 1", subject_id=catalog.subject.id)

    stored = algolia.indices["posts_test"][str(post.id)]
    assert stored["subject"]["name"] == "Classical Physics"
    assert stored["book"]["name"] == "Lectures Vol. 1"


def test_delete_book_and_subject_in_use_fail(db, catalog) -> None:
    """Restrict FKs block removing ancestors that still have children."""
    with pytest.raises(IntegrityError):
        delete_book(db, catalog.book.id)
    with pytest.raises(IntegrityError):
        delete_subject(db, catalog.subject.id)


def test_create_and_delete_unused_book(db, catalog) -> None:
    book = create_book(db, name="Griffiths", subject_id=catalog.subject.id, embed_url="")
    assert book.embed_url is None
    assert delete_book(db, book.id) is True
