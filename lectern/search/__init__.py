"""Hosted (Algolia) object index for posts."""

from lectern.search.algolia import PostIndex, get_post_index

__all__ = ["PostIndex", "get_post_index"]
