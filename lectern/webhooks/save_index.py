# lectern/webhooks/save_index.py
"""
Keep the search index in step with the posts table.

Upserts re-read the canonical denormalized record and push it; deletes go
straight to the index. Nothing here retries or catches: a failed fetch or
push propagates to the caller, and the DB write that preceded it stays.
"""
from typing import Iterable

import structlog
from sqlalchemy.orm import Session

from lectern.search.algolia import PostIndex
from lectern.services.post import (
    get_all_posts_for_indexing,
    get_post_by_id_for_indexing,
    get_posts_by_ids_for_indexing,
)

logger = structlog.get_logger()


def save_index(db: Session, index: PostIndex, id) -> dict:
    post = get_post_by_id_for_indexing(db, id)
    if post is None:
        raise LookupError(f"post {id} not found")
    index.save_object(post)
    logger.info("search_index_saved", object_id=post["objectID"])
    return post


def save_indices(db: Session, index: PostIndex, ids: Iterable) -> int:
    """Re-push a known set of posts (after a chapter/book/subject rename)."""
    sent = index.save_objects(get_posts_by_ids_for_indexing(db, ids))
    logger.info("search_index_saved_many", count=sent)
    return sent


def save_many_indices(db: Session, index: PostIndex) -> int:
    sent = index.save_objects(get_all_posts_for_indexing(db))
    logger.info("search_index_rebuilt", count=sent)
    return sent


def delete_index(index: PostIndex, id) -> None:
    index.delete_object(str(id))
    logger.info("search_index_deleted", object_id=str(id))


def delete_many_indices(index: PostIndex, ids: Iterable) -> int:
    removed = index.delete_objects(str(i) for i in ids)
    logger.info("search_index_deleted_many", count=removed)
    return removed
