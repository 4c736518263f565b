# lectern/routers/admin/chapters.py
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lectern.actions.chapter import create_chapter, delete_chapter, update_chapter
from lectern.db.session import get_db
from lectern.search.algolia import PostIndex, get_post_index
from lectern.services.book import get_books_by_subject
from lectern.services.chapter import get_chapter_by_id, get_chapters, get_chapters_by_book
from lectern.services.subject import get_subjects
from lectern.routers.admin.helpers import (
    CHAPTER_IN_USE,
    GENERIC_ERROR,
    _tpl,
    flash,
    not_found,
    to_int_or_none,
)

logger = structlog.get_logger()

router = APIRouter()


def _render_form(request: Request, db: Session, *, mode: str, form: dict, chapter=None,
                 error: Optional[str] = None, status_code: int = 200):
    return _tpl(request).TemplateResponse(
        request,
        "admin/chapter_form.html",
        {
            "mode": mode,
            "chapter": chapter,
            "form": form,
            "subjects": get_subjects(),
            "books": get_books_by_subject(db, form.get("subject_id")),
            "error": error,
            "title": "Create chapter" if mode == "new" else "Edit chapter",
        },
        status_code=status_code,
    )


# --------------- List ---------------------
@router.get("/chapters", response_class=HTMLResponse)
def chapters_list(
    request: Request,
    db: Session = Depends(get_db),
    page: int = Query(1),
    limit: int = Query(10),
    query: Optional[str] = Query(None),
):
    result = get_chapters(db, page=page, limit=limit, query=query)
    return _tpl(request).TemplateResponse(
        request,
        "admin/chapters.html",
        {"result": result, "query": query or "", "title": "Chapters"},
    )


@router.get("/chapters/by-book/{book_id}")
def chapters_by_book(book_id: int, db: Session = Depends(get_db)):
    # Feeds the chapter <select> once a book is picked on the post form
    return JSONResponse(get_chapters_by_book(db, book_id))
# -----------------------------------------


# --------------- Create -------------------
@router.get("/chapters/new", response_class=HTMLResponse)
def chapter_new(request: Request, db: Session = Depends(get_db), subject_id: Optional[str] = None):
    return _render_form(request, db, mode="new", form={"subject_id": to_int_or_none(subject_id)})


@router.post("/chapters/create")
def chapter_create(
    request: Request,
    db: Session = Depends(get_db),
    name: str = Form(...),
    subject_id: Optional[str] = Form(None),
    book_author_id: Optional[str] = Form(None),
):
    form = {
        "name": name,
        "subject_id": to_int_or_none(subject_id),
        "book_author_id": to_int_or_none(book_author_id),
    }
    if not name.strip() or form["book_author_id"] is None:
        return _render_form(request, db, mode="new", form=form,
                            error="Name and book/author are required.", status_code=400)

    try:
        ch = create_chapter(db, name=name, book_author_id=form["book_author_id"])
    except Exception:
        logger.exception("chapter_create_failed")
        return _render_form(request, db, mode="new", form=form, error=GENERIC_ERROR, status_code=500)

    flash(request, "Chapter created.")
    return RedirectResponse(url=f"/admin/chapters/{ch.id}/edit", status_code=303)
# -----------------------------------------


# --------------- Edit / Update ------------
@router.get("/chapters/{chapter_id}/edit", response_class=HTMLResponse)
def chapter_edit(chapter_id: int, request: Request, db: Session = Depends(get_db)):
    ch = get_chapter_by_id(db, chapter_id)
    if not ch:
        return not_found(request)

    form = {
        "name": ch["name"],
        "subject_id": ch["subject"]["id"],
        "book_author_id": ch["book"]["id"],
    }
    return _render_form(request, db, mode="edit", form=form, chapter=ch)


@router.post("/chapters/{chapter_id}/update")
def chapter_update(
    chapter_id: int,
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
    name: str = Form(...),
    subject_id: Optional[str] = Form(None),
    book_author_id: Optional[str] = Form(None),
):
    ch = get_chapter_by_id(db, chapter_id)
    if not ch:
        return not_found(request)

    form = {
        "name": name,
        "subject_id": to_int_or_none(subject_id),
        "book_author_id": to_int_or_none(book_author_id),
    }
    if not name.strip() or form["book_author_id"] is None:
        return _render_form(request, db, mode="edit", form=form, chapter=ch,
                            error="Name and book/author are required.", status_code=400)

    try:
        update_chapter(db, index, chapter_id, name=name, book_author_id=form["book_author_id"])
    except Exception:
        logger.exception("chapter_update_failed", chapter_id=chapter_id)
        return _render_form(request, db, mode="edit", form=form, chapter=ch,
                            error=GENERIC_ERROR, status_code=500)

    flash(request, "Chapter updated.")
    return RedirectResponse(url=f"/admin/chapters/{chapter_id}/edit", status_code=303)
# -----------------------------------------


# --------------- Delete -------------------
@router.post("/chapters/{chapter_id}/delete")
def chapter_delete(chapter_id: int, request: Request, db: Session = Depends(get_db)):
    ch = get_chapter_by_id(db, chapter_id)
    if not ch:
        return not_found(request)

    form = {"name": ch["name"], "subject_id": ch["subject"]["id"], "book_author_id": ch["book"]["id"]}
    try:
        delete_chapter(db, chapter_id)
    except IntegrityError:
        # Posts still point here (FK restrict); don't dig into the cause
        logger.info("chapter_delete_blocked", chapter_id=chapter_id)
        return _render_form(request, db, mode="edit", form=form, chapter=ch,
                            error=CHAPTER_IN_USE, status_code=409)
    except Exception:
        logger.exception("chapter_delete_failed", chapter_id=chapter_id)
        return _render_form(request, db, mode="edit", form=form, chapter=ch,
                            error=GENERIC_ERROR, status_code=500)

    flash(request, "Chapter deleted.")
    return RedirectResponse(url="/admin/chapters", status_code=303)
# -----------------------------------------
