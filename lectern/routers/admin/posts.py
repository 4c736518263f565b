# lectern/routers/admin/posts.py
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from lectern.actions.post import create_post, delete_post, delete_posts, update_post
from lectern.db.session import get_db
from lectern.search.algolia import PostIndex, get_post_index
from lectern.services.book import get_books_by_subject
from lectern.services.chapter import get_chapters_by_book
from lectern.services.post import get_post_by_id, get_posts
from lectern.services.subject import get_subjects
from lectern.routers.admin.helpers import (
    GENERIC_ERROR,
    _tpl,
    flash,
    not_found,
    parse_ids,
    parse_keywords,
    to_int_or_none,
)

logger = structlog.get_logger()

router = APIRouter()


def _render_form(request: Request, db: Session, *, mode: str, form: dict, post=None,
                 error: Optional[str] = None, status_code: int = 200):
    return _tpl(request).TemplateResponse(
        request,
        "admin/post_form.html",
        {
            "mode": mode,
            "post": post,
            "form": form,
            "subjects": get_subjects(),
            "books": get_books_by_subject(db, form.get("subject_id")),
            "chapters": get_chapters_by_book(db, form.get("book_author_id")),
            "error": error,
            "title": "Create post" if mode == "new" else "Edit post",
        },
        status_code=status_code,
    )


def _form_values(text, page, keywords, image_url, subject_id, book_author_id, chapter_id) -> dict:
    return {
        "text": text,
        "page": to_int_or_none(page),
        "keywords": ", ".join(parse_keywords(keywords)),
        "image_url": (image_url or "").strip() or None,
        "subject_id": to_int_or_none(subject_id),
        "book_author_id": to_int_or_none(book_author_id),
        "chapter_id": to_int_or_none(chapter_id),
    }


# --------------- List ---------------------
@router.get("/posts", response_class=HTMLResponse)
def posts_list(request: Request, db: Session = Depends(get_db)):
    return _tpl(request).TemplateResponse(
        request,
        "admin/posts.html",
        {"posts": get_posts(db), "title": "Posts"},
    )


@router.post("/posts/delete-many")
async def posts_delete_many(
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
):
    form = await request.form()
    ids = parse_ids(form.getlist("ids"))
    try:
        removed = delete_posts(db, index, ids)
    except Exception:
        logger.exception("posts_delete_many_failed", count=len(ids))
        flash(request, GENERIC_ERROR)
        return RedirectResponse(url="/admin/posts", status_code=303)

    flash(request, f"{removed} post(s) deleted.")
    return RedirectResponse(url="/admin/posts", status_code=303)
# -----------------------------------------


# --------------- Create -------------------
@router.get("/posts/new", response_class=HTMLResponse)
def post_new(request: Request, db: Session = Depends(get_db)):
    return _render_form(request, db, mode="new", form={})


@router.post("/posts/create")
def post_create(
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
    text: str = Form(...),
    chapter_id: Optional[str] = Form(None),
    page: Optional[str] = Form(None),
    keywords: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
    subject_id: Optional[str] = Form(None),
    book_author_id: Optional[str] = Form(None),
):
    form = _form_values(text, page, keywords, image_url, subject_id, book_author_id, chapter_id)
    if not text.strip() or form["chapter_id"] is None:
        return _render_form(request, db, mode="new", form=form,
                            error="Text and chapter are required.", status_code=400)

    try:
        post = create_post(
            db,
            index,
            text=text,
            chapter_id=form["chapter_id"],
            page=form["page"],
            keywords=parse_keywords(keywords),
            image_url=form["image_url"],
        )
    except Exception:
        logger.exception("post_create_failed")
        return _render_form(request, db, mode="new", form=form, error=GENERIC_ERROR, status_code=500)

    flash(request, "Post created.")
    return RedirectResponse(url=f"/admin/posts/{post.id}/edit", status_code=303)
# -----------------------------------------


# --------------- Edit / Update ------------
@router.get("/posts/{post_id}/edit", response_class=HTMLResponse)
def post_edit(post_id: int, request: Request, db: Session = Depends(get_db)):
    post = get_post_by_id(db, post_id)
    if not post:
        return not_found(request)

    form = {
        "text": post["text"],
        "page": post["page"],
        "keywords": ", ".join(post["keywords"]),
        "image_url": post["image_url"],
        "subject_id": post["subject"]["id"],
        "book_author_id": post["book"]["id"],
        "chapter_id": post["chapter"]["id"],
    }
    return _render_form(request, db, mode="edit", form=form, post=post)


@router.post("/posts/{post_id}/update")
def post_update(
    post_id: int,
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
    text: str = Form(...),
    chapter_id: Optional[str] = Form(None),
    page: Optional[str] = Form(None),
    keywords: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
    subject_id: Optional[str] = Form(None),
    book_author_id: Optional[str] = Form(None),
):
    post = get_post_by_id(db, post_id)
    if not post:
        return not_found(request)

    form = _form_values(text, page, keywords, image_url, subject_id, book_author_id, chapter_id)
    if not text.strip() or form["chapter_id"] is None:
        return _render_form(request, db, mode="edit", form=form, post=post,
                            error="Text and chapter are required.", status_code=400)

    try:
        update_post(
            db,
            index,
            post_id,
            text=text,
            chapter_id=form["chapter_id"],
            page=form["page"],
            keywords=parse_keywords(keywords),
            image_url=form["image_url"],
        )
    except Exception:
        logger.exception("post_update_failed", post_id=post_id)
        return _render_form(request, db, mode="edit", form=form, post=post,
                            error=GENERIC_ERROR, status_code=500)

    flash(request, "Post updated.")
    return RedirectResponse(url=f"/admin/posts/{post_id}/edit", status_code=303)
# -----------------------------------------


# --------------- Delete -------------------
@router.post("/posts/{post_id}/delete")
def post_delete(
    post_id: int,
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
):
    try:
        deleted = delete_post(db, index, post_id)
    except Exception:
        logger.exception("post_delete_failed", post_id=post_id)
        flash(request, GENERIC_ERROR)
        return RedirectResponse(url=f"/admin/posts/{post_id}/edit", status_code=303)

    if not deleted:
        return not_found(request)
    flash(request, "Post deleted.")
    return RedirectResponse(url="/admin/posts", status_code=303)
# -----------------------------------------
