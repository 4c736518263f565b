# lectern/models/post.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from lectern.db.base import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=False)
    page = Column(Integer, nullable=True)
    # list[str]; searched by the index, not by SQL
    keywords = Column(JSON, nullable=False, default=list)
    image_url = Column(String(1024), nullable=True)

    chapter_id = Column(
        Integer, ForeignKey("chapters.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    chapter = relationship("Chapter", back_populates="posts")
