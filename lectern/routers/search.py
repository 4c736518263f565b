# lectern/routers/search.py
"""Public pages: search box, search results (index -> DB hydrate), single post."""
import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from lectern.db.session import get_db
from lectern.search.algolia import PostIndex, get_post_index
from lectern.services.book import get_book_by_id
from lectern.services.post import get_hit_posts_by_ids, get_post_by_id

logger = structlog.get_logger()

router = APIRouter(tags=["search"])

HITS_PER_PAGE = 20


def _templates(request: Request):
    return request.app.state.templates


def order_by_hits(rows: list[dict], hit_ids: list[str]) -> list[dict]:
    """Put DB rows back in index ranking order; ids the DB no longer has are dropped."""
    by_id = {str(r["id"]): r for r in rows}
    return [by_id[h] for h in hit_ids if h in by_id]


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return _templates(request).TemplateResponse(
        request, "pages/index.html", {"title": "Lectern", "q": ""}
    )


@router.get("/search", response_class=HTMLResponse)
def search(
    request: Request,
    q: str = Query("", max_length=200),
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
):
    query = q.strip()
    if not query:
        return _templates(request).TemplateResponse(
            request, "pages/index.html", {"title": "Lectern", "q": ""}
        )

    try:
        hit_ids = index.search(query, hits_per_page=HITS_PER_PAGE)
        results = order_by_hits(get_hit_posts_by_ids(db, hit_ids), hit_ids)
    except Exception:
        logger.exception("search_failed", query=query)
        return _templates(request).TemplateResponse(
            request,
            "pages/search.html",
            {"title": "Search", "q": query, "results": [], "error": "Something went wrong."},
            status_code=500,
        )

    logger.info("search_served", query=query, hits=len(hit_ids), results=len(results))
    return _templates(request).TemplateResponse(
        request,
        "pages/search.html",
        {"title": f"Search · {query}", "q": query, "results": results, "error": None},
    )


@router.get("/posts/{post_id}", response_class=HTMLResponse)
def show_post(post_id: int, request: Request, db: Session = Depends(get_db)):
    post = get_post_by_id(db, post_id)
    if not post:
        return _templates(request).TemplateResponse(
            request, "pages/not_found.html", {"title": "Not found"}, status_code=404
        )

    book = get_book_by_id(db, post["book"]["id"])
    return _templates(request).TemplateResponse(
        request,
        "pages/post_detail.html",
        {
            "post": post,
            "book_url": book["embed_url"] if book else None,
            "title": f"{post['chapter']['name']} · {post['book']['name']}",
        },
    )
