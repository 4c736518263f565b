# lectern/actions/chapter.py
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from lectern.db.session import commit_or_rollback
from lectern.models.chapter import Chapter
from lectern.search.algolia import PostIndex
from lectern.services.post import get_post_ids_by_chapter
from lectern.webhooks.save_index import save_indices

logger = structlog.get_logger()


def create_chapter(db: Session, *, name: str, book_author_id: int) -> Chapter:
    ch = Chapter(name=name.strip(), book_author_id=book_author_id)
    db.add(ch)
    commit_or_rollback(db)
    logger.info("chapter_created", chapter_id=ch.id)
    return ch


def update_chapter(
    db: Session, index: PostIndex, chapter_id: int, *, name: str, book_author_id: int
) -> Optional[Chapter]:
    """Rename/move a chapter. Its posts carry the chapter, book and subject
    names in the index, so they are re-pushed afterwards."""
    ch = db.get(Chapter, chapter_id)
    if ch is None:
        return None
    ch.name = name.strip()
    ch.book_author_id = book_author_id
    commit_or_rollback(db)
    logger.info("chapter_updated", chapter_id=ch.id)

    save_indices(db, index, get_post_ids_by_chapter(db, ch.id))
    return ch


def delete_chapter(db: Session, chapter_id: int) -> bool:
    """
    Delete a chapter. Posts reference it with ON DELETE RESTRICT, so a chapter
    still in use raises IntegrityError and nothing changes.
    """
    ch = db.get(Chapter, chapter_id)
    if ch is None:
        return False
    db.delete(ch)
    commit_or_rollback(db)
    logger.info("chapter_deleted", chapter_id=chapter_id)
    return True
