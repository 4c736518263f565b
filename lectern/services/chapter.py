# lectern/services/chapter.py
import math

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lectern.models.book import BookAuthor
from lectern.models.chapter import Chapter
from lectern.models.post import Post
from lectern.models.subject import Subject

MAX_LIMIT = 100

_chapters_query = (
    select(
        Chapter.id,
        Chapter.name,
        BookAuthor.id.label("book_id"),
        BookAuthor.name.label("book_name"),
        Subject.id.label("subject_id"),
        Subject.name.label("subject_name"),
    )
    .select_from(Chapter)
    .join(BookAuthor, BookAuthor.id == Chapter.book_author_id)
    .join(Subject, Subject.id == BookAuthor.subject_id)
)


def _as_dict(r) -> dict:
    return {
        "id": r.id,
        "name": r.name,
        "book": {"id": r.book_id, "name": r.book_name},
        "subject": {"id": r.subject_id, "name": r.subject_name},
    }


def get_chapter_by_id(db: Session, chapter_id: int) -> dict | None:
    row = db.execute(_chapters_query.where(Chapter.id == chapter_id)).first()
    return _as_dict(row) if row else None


def get_chapters_by_book(db: Session, book_id) -> list[dict]:
    if book_id in (None, ""):
        return []
    stmt = (
        select(Chapter.id, Chapter.name)
        .where(Chapter.book_author_id == int(book_id))
        .order_by(Chapter.name, Chapter.id)
    )
    return [{"id": r.id, "name": r.name} for r in db.execute(stmt)]


def get_chapters(db: Session, page: int = 1, limit: int = 10, query: str | None = None) -> dict:
    """
    One page of chapters for the admin table.

    `query` is a case-insensitive substring match on the chapter name.
    page < 1 becomes 1; limit is clamped to [1, MAX_LIMIT].
    """
    page = max(1 if page is None else int(page), 1)
    limit = min(max(10 if limit is None else int(limit), 1), MAX_LIMIT)
    q = (query or "").strip()

    stmt = _chapters_query
    count_stmt = select(func.count(Chapter.id))
    if q:
        cond = Chapter.name.ilike(f"%{q}%")
        stmt = stmt.where(cond)
        count_stmt = count_stmt.where(cond)

    total = db.scalar(count_stmt) or 0
    rows = db.execute(
        stmt.order_by(Chapter.id.desc()).limit(limit).offset((page - 1) * limit)
    )
    # post counts for the rows on this page only
    data = [_as_dict(r) for r in rows]
    ids = [c["id"] for c in data]
    counts = {}
    if ids:
        counts = dict(
            db.execute(
                select(Post.chapter_id, func.count(Post.id))
                .where(Post.chapter_id.in_(ids))
                .group_by(Post.chapter_id)
            ).all()
        )
    for c in data:
        c["post_count"] = counts.get(c["id"], 0)

    return {
        "data": data,
        "page": page,
        "limit": limit,
        "total": total,
        "page_count": math.ceil(total / limit) if total else 0,
    }
