# lectern/routers/admin/catalog.py
"""Subjects and books/authors: list pages with inline create/rename/delete forms."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lectern.actions.catalog import (
    create_book,
    create_subject,
    delete_book,
    delete_subject,
    update_book,
    update_subject,
)
from lectern.db.session import get_db
from lectern.search.algolia import PostIndex, get_post_index
from lectern.services.book import get_books, get_books_by_subject
from lectern.services.subject import get_subjects
from lectern.routers.admin.helpers import (
    BOOK_IN_USE,
    GENERIC_ERROR,
    SUBJECT_IN_USE,
    _tpl,
    flash,
    not_found,
    to_int_or_none,
)

logger = structlog.get_logger()

router = APIRouter()


def _subjects_page(request: Request, error: Optional[str] = None, status_code: int = 200):
    return _tpl(request).TemplateResponse(
        request,
        "admin/subjects.html",
        {"subjects": get_subjects(), "error": error, "title": "Subjects"},
        status_code=status_code,
    )


def _books_page(request: Request, db: Session, error: Optional[str] = None, status_code: int = 200):
    return _tpl(request).TemplateResponse(
        request,
        "admin/books.html",
        {"books": get_books(db), "subjects": get_subjects(), "error": error, "title": "Books"},
        status_code=status_code,
    )


# ---------------- Subjects ----------------
@router.get("/subjects", response_class=HTMLResponse)
def subjects_list(request: Request):
    return _subjects_page(request)


@router.post("/subjects/create")
def subject_create(request: Request, db: Session = Depends(get_db), name: str = Form(...)):
    if not name.strip():
        return _subjects_page(request, error="Name is required.", status_code=400)
    try:
        create_subject(db, name=name)
    except Exception:
        logger.exception("subject_create_failed")
        return _subjects_page(request, error=GENERIC_ERROR, status_code=500)
    flash(request, "Subject created.")
    return RedirectResponse(url="/admin/subjects", status_code=303)


@router.post("/subjects/{subject_id}/update")
def subject_update(
    subject_id: int,
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
    name: str = Form(...),
):
    if not name.strip():
        return _subjects_page(request, error="Name is required.", status_code=400)
    try:
        subject = update_subject(db, index, subject_id, name=name)
    except Exception:
        logger.exception("subject_update_failed", subject_id=subject_id)
        return _subjects_page(request, error=GENERIC_ERROR, status_code=500)
    if subject is None:
        return not_found(request)
    flash(request, "Subject updated.")
    return RedirectResponse(url="/admin/subjects", status_code=303)


@router.post("/subjects/{subject_id}/delete")
def subject_delete(subject_id: int, request: Request, db: Session = Depends(get_db)):
    try:
        deleted = delete_subject(db, subject_id)
    except IntegrityError:
        logger.info("subject_delete_blocked", subject_id=subject_id)
        return _subjects_page(request, error=SUBJECT_IN_USE, status_code=409)
    except Exception:
        logger.exception("subject_delete_failed", subject_id=subject_id)
        return _subjects_page(request, error=GENERIC_ERROR, status_code=500)
    if not deleted:
        return not_found(request)
    flash(request, "Subject deleted.")
    return RedirectResponse(url="/admin/subjects", status_code=303)
# -----------------------------------------


# ---------------- Books -------------------
@router.get("/books", response_class=HTMLResponse)
def books_list(request: Request, db: Session = Depends(get_db)):
    return _books_page(request, db)


@router.get("/books/by-subject/{subject_id}")
def books_by_subject(subject_id: int, db: Session = Depends(get_db)):
    # Feeds the book <select> once a subject is picked on the chapter/post forms
    return JSONResponse(get_books_by_subject(db, subject_id))


@router.post("/books/create")
def book_create(
    request: Request,
    db: Session = Depends(get_db),
    name: str = Form(...),
    subject_id: Optional[str] = Form(None),
    embed_url: Optional[str] = Form(None),
):
    sid = to_int_or_none(subject_id)
    if not name.strip() or sid is None:
        return _books_page(request, db, error="Name and subject are required.", status_code=400)
    try:
        create_book(db, name=name, subject_id=sid, embed_url=(embed_url or "").strip() or None)
    except Exception:
        logger.exception("book_create_failed")
        return _books_page(request, db, error=GENERIC_ERROR, status_code=500)
    flash(request, "Book created.")
    return RedirectResponse(url="/admin/books", status_code=303)


@router.post("/books/{book_id}/update")
def book_update(
    book_id: int,
    request: Request,
    db: Session = Depends(get_db),
    index: PostIndex = Depends(get_post_index),
    name: str = Form(...),
    subject_id: Optional[str] = Form(None),
    embed_url: Optional[str] = Form(None),
):
    sid = to_int_or_none(subject_id)
    if not name.strip() or sid is None:
        return _books_page(request, db, error="Name and subject are required.", status_code=400)
    try:
        book = update_book(
            db, index, book_id, name=name, subject_id=sid, embed_url=(embed_url or "").strip() or None
        )
    except Exception:
        logger.exception("book_update_failed", book_id=book_id)
        return _books_page(request, db, error=GENERIC_ERROR, status_code=500)
    if book is None:
        return not_found(request)
    flash(request, "Book updated.")
    return RedirectResponse(url="/admin/books", status_code=303)


@router.post("/books/{book_id}/delete")
def book_delete(book_id: int, request: Request, db: Session = Depends(get_db)):
    try:
        deleted = delete_book(db, book_id)
    except IntegrityError:
        logger.info("book_delete_blocked", book_id=book_id)
        return _books_page(request, db, error=BOOK_IN_USE, status_code=409)
    except Exception:
        logger.exception("book_delete_failed", book_id=book_id)
        return _books_page(request, db, error=GENERIC_ERROR, status_code=500)
    if not deleted:
        return not_found(request)
    flash(request, "Book deleted.")
    return RedirectResponse(url="/admin/books", status_code=303)
# -----------------------------------------
