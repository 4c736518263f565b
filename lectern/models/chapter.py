# lectern/models/chapter.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from lectern.db.base import Base


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    book_author_id = Column(
        Integer, ForeignKey("book_authors.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    book = relationship("BookAuthor", back_populates="chapters")
    posts = relationship("Post", back_populates="chapter", passive_deletes="all")
