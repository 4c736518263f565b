# lectern/services/post.py
"""
Read side for posts. Every query inner-joins the full hierarchy
post -> chapter -> book_author -> subject, so a post whose ancestors are
missing never comes back.

Statements are built once at import and executed with bound parameters.
"""
from typing import Iterable, Optional

from sqlalchemy import bindparam, select
from sqlalchemy.orm import Session

from lectern.models.book import BookAuthor
from lectern.models.chapter import Chapter
from lectern.models.post import Post
from lectern.models.subject import Subject


def _joined(*columns):
    return (
        select(*columns)
        .select_from(Post)
        .join(Chapter, Chapter.id == Post.chapter_id)
        .join(BookAuthor, BookAuthor.id == Chapter.book_author_id)
        .join(Subject, Subject.id == BookAuthor.subject_id)
    )


def _to_int(value) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


# ---------- Prepared statements ----------
_posts_query = _joined(
    Post.id,
    Post.text,
    Post.page,
    Post.keywords,
    Post.image_url,
    Chapter.id.label("chapter_id"),
    Chapter.name.label("chapter_name"),
    Subject.id.label("subject_id"),
    Subject.name.label("subject_name"),
    BookAuthor.id.label("book_id"),
    BookAuthor.name.label("book_name"),
)

_posts_stmt = _posts_query.order_by(Post.id)
_post_by_id_stmt = _posts_query.where(Post.id == bindparam("id"))

_indexing_query = _joined(
    Post.id,
    Post.text,
    Post.page,
    Post.keywords,
    Chapter.name.label("chapter_name"),
    Subject.name.label("subject_name"),
    BookAuthor.name.label("book_name"),
)
_all_for_indexing_stmt = _indexing_query.order_by(Post.id)
_for_indexing_by_id_stmt = _indexing_query.where(Post.id == bindparam("id"))
_for_indexing_by_ids_stmt = _indexing_query.where(
    Post.id.in_(bindparam("ids", expanding=True))
).order_by(Post.id)

_hit_posts_stmt = _joined(
    Post.id,
    Post.page,
    Post.image_url,
    Chapter.name.label("chapter"),
    Subject.name.label("subject"),
    BookAuthor.name.label("book"),
    BookAuthor.embed_url.label("book_url"),
).where(Post.id.in_(bindparam("ids", expanding=True)))
# -----------------------------------------


def _nested(row) -> dict:
    return {
        "id": row.id,
        "text": row.text,
        "page": row.page,
        "keywords": list(row.keywords or []),
        "image_url": row.image_url,
        "chapter": {"id": row.chapter_id, "name": row.chapter_name},
        "subject": {"id": row.subject_id, "name": row.subject_name},
        "book": {"id": row.book_id, "name": row.book_name},
    }


def _index_record(row) -> dict:
    """Shape pushed to the search index; objectID mirrors the post id."""
    return {
        "objectID": str(row.id),
        "text": row.text,
        "page": row.page,
        "keywords": list(row.keywords or []),
        "chapter": {"name": row.chapter_name},
        "subject": {"name": row.subject_name},
        "book": {"name": row.book_name},
    }


def get_posts(db: Session) -> list[dict]:
    return [_nested(r) for r in db.execute(_posts_stmt)]


def get_post_by_id(db: Session, id) -> Optional[dict]:
    post_id = _to_int(id)
    if post_id is None:
        return None
    row = db.execute(_post_by_id_stmt, {"id": post_id}).first()
    return _nested(row) if row else None


def get_post_by_id_for_indexing(db: Session, id) -> Optional[dict]:
    post_id = _to_int(id)
    if post_id is None:
        return None
    row = db.execute(_for_indexing_by_id_stmt, {"id": post_id}).first()
    return _index_record(row) if row else None


def get_all_posts_for_indexing(db: Session) -> list[dict]:
    return [_index_record(r) for r in db.execute(_all_for_indexing_stmt)]


def get_posts_by_ids_for_indexing(db: Session, ids: Iterable) -> list[dict]:
    wanted = [i for i in (_to_int(v) for v in ids) if i is not None]
    if not wanted:
        return []
    rows = db.execute(_for_indexing_by_ids_stmt, {"ids": wanted})
    return [_index_record(r) for r in rows]


def get_hit_posts_by_ids(db: Session, ids: Iterable) -> list[dict]:
    """
    Flattened rows for search hits. Ids that don't exist (or aren't numeric)
    are simply absent from the result; order is whatever the database returns.
    """
    wanted = [i for i in (_to_int(v) for v in ids) if i is not None]
    if not wanted:
        return []
    rows = db.execute(_hit_posts_stmt, {"ids": wanted})
    return [
        {
            "id": r.id,
            "page": r.page,
            "image_url": r.image_url,
            "chapter": r.chapter,
            "subject": r.subject,
            "book": r.book,
            "book_url": r.book_url,
        }
        for r in rows
    ]


def get_post_ids_by_chapter(db: Session, chapter_id: int) -> list[int]:
    return list(db.scalars(select(Post.id).where(Post.chapter_id == chapter_id)))


def get_post_ids_by_book(db: Session, book_id: int) -> list[int]:
    stmt = (
        select(Post.id)
        .join(Chapter, Chapter.id == Post.chapter_id)
        .where(Chapter.book_author_id == book_id)
    )
    return list(db.scalars(stmt))


def get_post_ids_by_subject(db: Session, subject_id: int) -> list[int]:
    stmt = (
        select(Post.id)
        .join(Chapter, Chapter.id == Post.chapter_id)
        .join(BookAuthor, BookAuthor.id == Chapter.book_author_id)
        .where(BookAuthor.subject_id == subject_id)
    )
    return list(db.scalars(stmt))
