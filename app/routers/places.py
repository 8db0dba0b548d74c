# app/routers/places.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.common.deps import get_current_user, get_feed_service, get_visibility_resolver
from app.db.session import get_db
from app.models.feed import Comment, FeedLike, FeedSummary
from app.models.place import Place, PlaceCreate, PlaceRead
from app.models.user import User
from app.services.feed_service import FeedService, feed_payload
from app.services.privacy import VisibilityResolver

router = APIRouter()


@router.get("")
def list_places(db: Session = Depends(get_db)):
    places = db.query(Place).order_by(Place.name.asc()).all()
    return {"places": [PlaceRead.model_validate(p) for p in places]}


@router.post("", status_code=201)
def create_place(
    body: PlaceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if db.query(Place.id).filter(Place.name == body.name).first() is not None:
        raise HTTPException(status_code=409, detail="Place already exists")

    place = Place(**body.model_dump())
    db.add(place)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Place already exists")
    db.refresh(place)
    return {"place": PlaceRead.model_validate(place)}


# 某個地點最近的貼文 (地圖頁使用)
@router.get("/{place_id}/feeds")
def list_place_feeds(
    place_id: int,
    current_user: User = Depends(get_current_user),
    feeds: FeedService = Depends(get_feed_service),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    if feeds.get_place(place_id) is None:
        raise HTTPException(status_code=404, detail="Place not found")

    # 先撈出時間內的貼文，再把看不到的濾掉
    visible = resolver.filter_visible(current_user.id, feeds.recent_at_place(place_id))

    # 留言數、讚數一次查完，不要每篇各查一次
    ids = [f.id for f in visible]
    comment_counts = feeds.count_by_feed(Comment, ids)
    like_counts = feeds.count_by_feed(FeedLike, ids)

    return {
        "feeds": [
            FeedSummary(
                **feed_payload(f),
                comment_count=comment_counts[f.id],
                like_count=like_counts[f.id],
            )
            for f in visible
        ]
    }
