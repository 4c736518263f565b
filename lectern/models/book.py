# lectern/models/book.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from lectern.db.base import Base


class BookAuthor(Base):
    """A book (or author collection) inside one subject."""

    __tablename__ = "book_authors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    # External reader/embed (e.g. a hosted PDF viewer)
    embed_url = Column(String(1024), nullable=True)
    subject_id = Column(
        Integer, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subject = relationship("Subject", back_populates="books")
    chapters = relationship("Chapter", back_populates="book", passive_deletes="all")
