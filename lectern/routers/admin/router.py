# lectern/routers/admin/router.py
import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lectern.db.session import get_db
from lectern.models.book import BookAuthor
from lectern.models.chapter import Chapter
from lectern.models.post import Post
from lectern.models.subject import Subject
from lectern.search.algolia import PostIndex, get_post_index
from lectern.services.user import get_daily_user_count
from lectern.webhooks.save_index import save_many_indices
from lectern.routers.admin import catalog, chapters, posts, uploads
from lectern.routers.admin.helpers import GENERIC_ERROR, _tpl, flash

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["admin"])


# --------------- Dashboard ----------------
@router.get("", response_class=HTMLResponse)
@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, db: Session = Depends(get_db)):
    counts = {
        "subjects": db.scalar(select(func.count(Subject.id))),
        "books": db.scalar(select(func.count(BookAuthor.id))),
        "chapters": db.scalar(select(func.count(Chapter.id))),
        "posts": db.scalar(select(func.count(Post.id))),
    }
    return _tpl(request).TemplateResponse(
        request,
        "admin/dashboard.html",
        {"counts": counts, "daily_users": get_daily_user_count(), "title": "Admin"},
    )
# -----------------------------------------


# --------------- Full reindex -------------
@router.post("/reindex")
def reindex(request: Request, db: Session = Depends(get_db), index: PostIndex = Depends(get_post_index)):
    try:
        sent = save_many_indices(db, index)
    except Exception:
        logger.exception("reindex_failed")
        flash(request, GENERIC_ERROR)
        return RedirectResponse(url="/admin/dashboard", status_code=303)
    flash(request, f"Re-indexed {sent} post(s).")
    return RedirectResponse(url="/admin/dashboard", status_code=303)
# -----------------------------------------


router.include_router(chapters.router)
router.include_router(posts.router)
router.include_router(catalog.router)
router.include_router(uploads.router)
