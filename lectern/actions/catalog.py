# lectern/actions/catalog.py
"""Subject and book/author mutations."""
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from lectern.db.session import commit_or_rollback
from lectern.models.book import BookAuthor
from lectern.models.subject import Subject
from lectern.search.algolia import PostIndex
from lectern.services.post import get_post_ids_by_book, get_post_ids_by_subject
from lectern.services.subject import SUBJECTS_TAG
from lectern.utils.cache import revalidate_tag
from lectern.webhooks.save_index import save_indices

logger = structlog.get_logger()


# ---------------- Subjects ----------------
def create_subject(db: Session, *, name: str) -> Subject:
    subject = Subject(name=name.strip())
    db.add(subject)
    commit_or_rollback(db)
    revalidate_tag(SUBJECTS_TAG)
    logger.info("subject_created", subject_id=subject.id)
    return subject


def update_subject(db: Session, index: PostIndex, subject_id: int, *, name: str) -> Optional[Subject]:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return None
    subject.name = name.strip()
    commit_or_rollback(db)
    revalidate_tag(SUBJECTS_TAG)
    logger.info("subject_updated", subject_id=subject.id)

    save_indices(db, index, get_post_ids_by_subject(db, subject.id))
    return subject


def delete_subject(db: Session, subject_id: int) -> bool:
    """Raises IntegrityError while books still reference the subject."""
    subject = db.get(Subject, subject_id)
    if subject is None:
        return False
    db.delete(subject)
    commit_or_rollback(db)
    revalidate_tag(SUBJECTS_TAG)
    logger.info("subject_deleted", subject_id=subject_id)
    return True
# -----------------------------------------


# ---------------- Books -------------------
def create_book(db: Session, *, name: str, subject_id: int, embed_url: Optional[str] = None) -> BookAuthor:
    book = BookAuthor(name=name.strip(), subject_id=subject_id, embed_url=embed_url or None)
    db.add(book)
    commit_or_rollback(db)
    logger.info("book_created", book_id=book.id)
    return book


def update_book(
    db: Session,
    index: PostIndex,
    book_id: int,
    *,
    name: str,
    subject_id: int,
    embed_url: Optional[str] = None,
) -> Optional[BookAuthor]:
    book = db.get(BookAuthor, book_id)
    if book is None:
        return None
    book.name = name.strip()
    book.subject_id = subject_id
    book.embed_url = embed_url or None
    commit_or_rollback(db)
    logger.info("book_updated", book_id=book.id)

    save_indices(db, index, get_post_ids_by_book(db, book.id))
    return book


def delete_book(db: Session, book_id: int) -> bool:
    """Raises IntegrityError while chapters still reference the book."""
    book = db.get(BookAuthor, book_id)
    if book is None:
        return False
    db.delete(book)
    commit_or_rollback(db)
    logger.info("book_deleted", book_id=book_id)
    return True
# -----------------------------------------
