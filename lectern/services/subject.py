# lectern/services/subject.py
from sqlalchemy import select

from lectern.config import SUBJECTS_TTL
from lectern.db.session import SessionLocal
from lectern.models.subject import Subject
from lectern.utils.cache import cached

SUBJECTS_TAG = "subjects"


@cached("getSubjects", tags=[SUBJECTS_TAG], revalidate=SUBJECTS_TTL)
def get_subjects() -> list[dict]:
    """All subjects (id, name) by name. Cached; subject actions revalidate the tag."""
    with SessionLocal() as db:
        rows = db.execute(select(Subject.id, Subject.name).order_by(Subject.name, Subject.id))
        return [{"id": r.id, "name": r.name} for r in rows]

