# lectern/actions/post.py
"""Post mutations: write the row, commit, then mirror the change into the index."""
from typing import Iterable, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from lectern.db.session import commit_or_rollback
from lectern.models.post import Post
from lectern.search.algolia import PostIndex
from lectern.webhooks.save_index import delete_index, delete_many_indices, save_index

logger = structlog.get_logger()


def create_post(
    db: Session,
    index: PostIndex,
    *,
    text: str,
    chapter_id: int,
    page: Optional[int] = None,
    keywords: Optional[list[str]] = None,
    image_url: Optional[str] = None,
) -> Post:
    post = Post(
        text=text,
        chapter_id=chapter_id,
        page=page,
        keywords=list(keywords or []),
        image_url=image_url or None,
    )
    db.add(post)
    commit_or_rollback(db)
    logger.info("post_created", post_id=post.id, chapter_id=chapter_id)

    save_index(db, index, post.id)
    return post


def update_post(
    db: Session,
    index: PostIndex,
    post_id: int,
    *,
    text: str,
    chapter_id: int,
    page: Optional[int] = None,
    keywords: Optional[list[str]] = None,
    image_url: Optional[str] = None,
) -> Optional[Post]:
    post = db.get(Post, post_id)
    if post is None:
        return None

    post.text = text
    post.chapter_id = chapter_id
    post.page = page
    post.keywords = list(keywords or [])
    post.image_url = image_url or None
    commit_or_rollback(db)
    logger.info("post_updated", post_id=post.id)

    save_index(db, index, post.id)
    return post


def delete_post(db: Session, index: PostIndex, post_id: int) -> bool:
    post = db.get(Post, post_id)
    if post is None:
        return False
    db.delete(post)
    commit_or_rollback(db)
    logger.info("post_deleted", post_id=post_id)

    delete_index(index, post_id)
    return True


def delete_posts(db: Session, index: PostIndex, post_ids: Iterable[int]) -> int:
    """Bulk delete. Only ids that existed are removed from the index."""
    wanted = list(post_ids)
    if not wanted:
        return 0
    existing = list(db.scalars(select(Post.id).where(Post.id.in_(wanted))))
    if not existing:
        return 0
    db.execute(delete(Post).where(Post.id.in_(existing)))
    commit_or_rollback(db)
    logger.info("posts_deleted", count=len(existing))

    delete_many_indices(index, existing)
    return len(existing)
