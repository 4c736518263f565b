"""Thin adapter over the Algolia search client for the posts index."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable

import structlog
from algoliasearch.search.client import SearchClientSync

from lectern.config import ALGOLIA_ADMIN_KEY, ALGOLIA_APP_ID, ALGOLIA_INDEX_NAME

logger = structlog.get_logger()


class PostIndex:
    """Object-level CRUD on one named index.

    Objects are keyed by ``objectID`` (the post id), so saving the same post
    twice replaces the stored record and deleting an unknown id is a no-op
    on Algolia's side.
    """

    def __init__(self, client: Any, index_name: str) -> None:
        self._client = client
        self.index_name = index_name

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = connect_client()
        return self._client

    def save_object(self, obj: dict) -> None:
        self.client.save_object(index_name=self.index_name, body=obj)

    def save_objects(self, objs: Iterable[dict]) -> int:
        batch = list(objs)
        if batch:
            self.client.save_objects(index_name=self.index_name, objects=batch)
        return len(batch)

    def delete_object(self, object_id: str) -> None:
        self.client.delete_object(index_name=self.index_name, object_id=str(object_id))

    def delete_objects(self, object_ids: Iterable[str]) -> int:
        ids = [str(i) for i in object_ids]
        if ids:
            self.client.delete_objects(index_name=self.index_name, object_ids=ids)
        return len(ids)

    def search(self, query: str, hits_per_page: int = 20) -> list[str]:
        """Run a query and return the matching object ids in ranking order.

        Args:
            query: Raw user query string.
            hits_per_page: Maximum number of hits to return.

        Returns:
            Object ids (post ids as strings), best match first.
        """
        resp = self.client.search_single_index(
            index_name=self.index_name,
            search_params={"query": query, "hitsPerPage": hits_per_page},
        )
        return [hit.object_id for hit in resp.hits]


def connect_client() -> SearchClientSync:
    if not (ALGOLIA_APP_ID and ALGOLIA_ADMIN_KEY):
        raise RuntimeError("Algolia env is missing. Check ALGOLIA_APP_ID, ALGOLIA_ADMIN_KEY.")
    client = SearchClientSync(ALGOLIA_APP_ID, ALGOLIA_ADMIN_KEY)
    logger.info("search_index_client_ready", index=ALGOLIA_INDEX_NAME)
    return client


@lru_cache(maxsize=1)
def get_post_index() -> PostIndex:
    """Shared index adapter used as a FastAPI dependency.

    The Algolia client is built on first use, so missing credentials fail
    inside the route's own error handling rather than while resolving
    dependencies.
    """
    return PostIndex(None, ALGOLIA_INDEX_NAME)
