# lectern/routers/admin/helpers.py
from typing import Optional

from fastapi import Request

GENERIC_ERROR = "Something went wrong."
CHAPTER_IN_USE = "Make sure you removed all posts using this chapter first."
BOOK_IN_USE = "Make sure you removed all chapters using this book first."
SUBJECT_IN_USE = "Make sure you removed all books using this subject first."


def _tpl(request: Request):
    # Use the shared Jinja2Templates configured in main.py
    return request.app.state.templates


def flash(request: Request, message: str) -> None:
    request.session["flash"] = message


def not_found(request: Request):
    return _tpl(request).TemplateResponse(
        request,
        "pages/not_found.html",
        {"title": "Not found"},
        status_code=404,
    )


def to_int_or_none(v: Optional[str]) -> Optional[int]:
    if v is None or str(v).strip() == "":
        return None
    try:
        return int(v)
    except ValueError:
        return None


def parse_keywords(v: Optional[str]) -> list[str]:
    """'a, b,,a ,c' -> ['a', 'b', 'c'] (trimmed, blanks dropped, first occurrence wins)."""
    if not v:
        return []
    seen: list[str] = []
    for part in v.split(","):
        word = part.strip()
        if word and word not in seen:
            seen.append(word)
    return seen


def parse_ids(values: list[str]) -> list[int]:
    out = []
    for v in values:
        i = to_int_or_none(v)
        if i is not None and i not in out:
            out.append(i)
    return out
