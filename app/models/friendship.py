# app/models/friendship.py

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict

from app.db.base_class import Base, utcnow


class FriendshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    FRIEND = "FRIEND"
    CLOSE_FRIEND = "CLOSE_FRIEND"
    BLOCKED = "BLOCKED"


class Friendship(Base):
    """
    有方向的關係：(A, B) 和 (B, A) 是兩筆不同的資料。
    B 接受 A 的邀請只會改 (A, B)，不會自動幫 B 建立反方向。
    """
    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("requester_id", "target_id", name="uq_friendship_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(FriendshipStatus, name="friendship_status"),
        default=FriendshipStatus.PENDING,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    requester = relationship("User", foreign_keys=[requester_id])
    target = relationship("User", foreign_keys=[target_id])

    def __repr__(self):
        return f"<Friendship {self.requester_id} -> {self.target_id} ({self.status})>"


class Edge(BaseModel):
    """
    關係存取層回傳的格式 (不管後面是資料庫還是記憶體)
    """
    requester_id: int
    target_id: int
    status: FriendshipStatus
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class TargetIn(BaseModel):
    target_id: int
