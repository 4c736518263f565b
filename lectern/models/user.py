# lectern/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, func, UniqueConstraint
from lectern.db.base import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)
