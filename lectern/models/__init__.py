# Import every model so Base.metadata sees all tables (alembic autogenerate, tests)
from lectern.models.subject import Subject  # noqa: F401
from lectern.models.book import BookAuthor  # noqa: F401
from lectern.models.chapter import Chapter  # noqa: F401
from lectern.models.post import Post  # noqa: F401
from lectern.models.user import User  # noqa: F401
