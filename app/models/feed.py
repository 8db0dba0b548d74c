# app/models/feed.py

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field

from app.db.base_class import Base, utcnow
from app.models.place import PlaceRead
from app.models.user import AuthorRead


class FeedStatus(str, enum.Enum):
    """貼文的可見等級，建立後就不能改"""
    PUBLIC = "PUBLIC"
    FRIEND = "FRIEND"
    CLOSE_FRIEND = "CLOSE_FRIEND"
    PRIVATE = "PRIVATE"


class Feed(Base):
    __tablename__ = "feeds"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(Enum(FeedStatus, name="feed_status"), nullable=False)
    image_key = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    author = relationship("User")
    place = relationship("Place")
    comments = relationship("Comment", back_populates="feed", order_by="Comment.created_at")
    likes = relationship("FeedLike", back_populates="feed")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    feed_id = Column(Integer, ForeignKey("feeds.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(String(1000), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    feed = relationship("Feed", back_populates="comments")
    author = relationship("User")


class FeedLike(Base):
    __tablename__ = "feed_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "feed_id", name="uq_feed_like"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    feed_id = Column(Integer, ForeignKey("feeds.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    feed = relationship("Feed", back_populates="likes")


# --- API 輸入 / 輸出格式 ---

class FeedCreate(BaseModel):
    place_id: int
    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=2000)
    status: FeedStatus
    image_key: Optional[str] = Field(default=None, min_length=1, max_length=255)


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)


class CommentRead(BaseModel):
    id: int
    feed_id: int
    content: str
    author: AuthorRead
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeedRead(BaseModel):
    id: int
    place_id: int
    title: str
    content: str
    status: FeedStatus
    image_url: Optional[str] = None
    author: AuthorRead
    created_at: datetime


class FeedSummary(FeedRead):
    comment_count: int
    like_count: int


class FeedDetail(FeedRead):
    place: PlaceRead
    comments: List[CommentRead]
    like_count: int
    liked_by_me: bool
