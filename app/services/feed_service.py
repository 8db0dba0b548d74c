# app/services/feed_service.py

from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.base_class import utcnow
from app.models.feed import Comment, Feed, FeedCreate, FeedLike
from app.models.place import Place
from app.models.user import AuthorRead


def build_public_url(image_key: Optional[str]) -> Optional[str]:
    if not image_key:
        return None
    return f"{settings.MEDIA_BASE_URL.rstrip('/')}/{image_key.lstrip('/')}"


def feed_payload(feed: Feed) -> dict:
    """所有貼文回應共用的欄位"""
    return {
        "id": feed.id,
        "place_id": feed.place_id,
        "title": feed.title,
        "content": feed.content,
        "status": feed.status,
        "image_url": build_public_url(feed.image_key),
        "author": AuthorRead.model_validate(feed.author),
        "created_at": feed.created_at,
    }


class FeedService:
    """貼文、留言、按讚的存取。這裡不做可見性檢查，交給路由呼叫 VisibilityResolver。"""

    def __init__(self, db: Session):
        self.db = db

    def get_feed(self, feed_id: int) -> Optional[Feed]:
        return self.db.query(Feed).filter(Feed.id == feed_id).first()

    def get_place(self, place_id: int) -> Optional[Place]:
        return self.db.query(Place).filter(Place.id == place_id).first()

    def create_feed(self, author_id: int, feed_in: FeedCreate) -> Feed:
        db_feed = Feed(author_id=author_id, **feed_in.model_dump())
        self.db.add(db_feed)
        self.db.commit()
        self.db.refresh(db_feed)
        return db_feed

    def recent_at_place(self, place_id: int, hours: int = None) -> List[Feed]:
        if hours is None:
            hours = settings.PLACE_FEED_WINDOW_HOURS
        since = utcnow() - timedelta(hours=hours)
        return (
            self.db.query(Feed)
            .filter(Feed.place_id == place_id, Feed.created_at >= since)
            .order_by(Feed.created_at.desc(), Feed.id.desc())
            .all()
        )

    # --- 留言 ---

    def add_comment(self, feed_id: int, author_id: int, content: str) -> Comment:
        comment = Comment(feed_id=feed_id, author_id=author_id, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    # --- 按讚 ---

    def like(self, feed_id: int, user_id: int) -> None:
        if self.has_liked(feed_id, user_id):
            return
        self.db.add(FeedLike(feed_id=feed_id, user_id=user_id))
        try:
            self.db.commit()
        except IntegrityError:
            # 同時按了兩次讚，結果一樣，不算錯
            self.db.rollback()

    def unlike(self, feed_id: int, user_id: int) -> int:
        deleted = self.db.query(FeedLike).filter(
            FeedLike.feed_id == feed_id,
            FeedLike.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def has_liked(self, feed_id: int, user_id: Optional[int]) -> bool:
        if user_id is None:
            return False
        return self.db.query(FeedLike.id).filter(
            FeedLike.feed_id == feed_id,
            FeedLike.user_id == user_id,
        ).first() is not None

    def like_count(self, feed_id: int) -> int:
        return self.db.query(func.count(FeedLike.id)).filter(FeedLike.feed_id == feed_id).scalar()

    def count_by_feed(self, model, feed_ids: Iterable[int]) -> Dict[int, int]:
        """回傳 {feed_id: 筆數}，model 可以是 Comment 或 FeedLike；沒有資料的算 0。"""
        feed_ids = list(feed_ids)
        if not feed_ids:
            return {}
        rows = (
            self.db.query(model.feed_id, func.count(model.id))
            .filter(model.feed_id.in_(feed_ids))
            .group_by(model.feed_id)
            .all()
        )
        counts = {feed_id: 0 for feed_id in feed_ids}
        counts.update({feed_id: total for feed_id, total in rows})
        return counts
