# lectern/services/user.py
from sqlalchemy import desc, func, select

from lectern.config import DAILY_USER_COUNT_TTL
from lectern.db.session import SessionLocal
from lectern.models.user import User
from lectern.utils.cache import cached

DAILY_USER_COUNT_TAG = "getDailyUserCount"

_created_date = func.date(User.created_at).label("created_date")

_daily_user_stmt = (
    select(func.count(User.id).label("user_count"), _created_date)
    .group_by(_created_date)
    .order_by(desc(_created_date))
    .limit(7)
)


@cached(DAILY_USER_COUNT_TAG, tags=[DAILY_USER_COUNT_TAG], revalidate=DAILY_USER_COUNT_TTL)
def get_daily_user_count() -> list[dict]:
    """Signups per day for the last 7 days that had any, newest first."""
    with SessionLocal() as db:
        rows = db.execute(_daily_user_stmt)
        return [
            {"count": r.user_count, "created_date": str(r.created_date)}
            for r in rows
        ]
