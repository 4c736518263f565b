# lectern/services/book.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from lectern.models.book import BookAuthor
from lectern.models.subject import Subject


def _as_dict(r) -> dict:
    return {
        "id": r.id,
        "name": r.name,
        "embed_url": r.embed_url,
        "subject": {"id": r.subject_id, "name": r.subject_name},
    }


_books_query = (
    select(
        BookAuthor.id,
        BookAuthor.name,
        BookAuthor.embed_url,
        Subject.id.label("subject_id"),
        Subject.name.label("subject_name"),
    )
    .join(Subject, Subject.id == BookAuthor.subject_id)
)


def get_books(db: Session) -> list[dict]:
    stmt = _books_query.order_by(Subject.name, BookAuthor.name, BookAuthor.id)
    return [_as_dict(r) for r in db.execute(stmt)]


def get_books_by_subject(db: Session, subject_id) -> list[dict]:
    """Books for the dependent <select> on the chapter/post forms. Empty for a blank id."""
    if subject_id in (None, ""):
        return []
    stmt = _books_query.where(BookAuthor.subject_id == int(subject_id)).order_by(
        BookAuthor.name, BookAuthor.id
    )
    return [_as_dict(r) for r in db.execute(stmt)]


def get_book_by_id(db: Session, book_id: int) -> dict | None:
    row = db.execute(_books_query.where(BookAuthor.id == book_id)).first()
    return _as_dict(row) if row else None
