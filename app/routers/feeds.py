# app/routers/feeds.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.common.deps import (
    get_current_user,
    get_feed_service,
    get_optional_user,
    get_visibility_resolver,
)
from app.models.feed import CommentCreate, CommentRead, Feed, FeedCreate, FeedDetail, FeedRead
from app.models.place import PlaceRead
from app.models.user import User
from app.services.feed_service import FeedService, feed_payload
from app.services.privacy import VisibilityResolver

logger = logging.getLogger(__name__)

router = APIRouter()


def _visible_feed(
    feed_id: int,
    viewer_id: Optional[int],
    feeds: FeedService,
    resolver: VisibilityResolver,
) -> Feed:
    """找不到貼文回 404，沒有權限看回 403"""
    feed = feeds.get_feed(feed_id)
    if feed is None:
        raise HTTPException(status_code=404, detail="Feed not found")

    if not resolver.can_view(viewer_id, feed.author_id, feed.status):
        logger.debug("viewer %s denied feed %s (%s)", viewer_id, feed.id, feed.status.value)
        raise HTTPException(status_code=403, detail="Forbidden")
    return feed


@router.post("", status_code=status.HTTP_201_CREATED)
def create_feed(
    body: FeedCreate,
    current_user: User = Depends(get_current_user),
    feeds: FeedService = Depends(get_feed_service),
):
    if feeds.get_place(body.place_id) is None:
        raise HTTPException(
            status_code=400,
            detail="Invalid place. You can post only to predefined places.",
        )

    feed = feeds.create_feed(current_user.id, body)
    logger.info("user %s posted feed %s at place %s (%s)",
                current_user.id, feed.id, feed.place_id, feed.status.value)
    return {"feed": FeedRead(**feed_payload(feed))}


@router.get("/{feed_id}")
def read_feed(
    feed_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    feeds: FeedService = Depends(get_feed_service),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    # 沒登入也可以看 PUBLIC 的貼文
    viewer_id = current_user.id if current_user else None
    feed = _visible_feed(feed_id, viewer_id, feeds, resolver)

    detail = FeedDetail(
        **feed_payload(feed),
        place=PlaceRead.model_validate(feed.place),
        comments=[CommentRead.model_validate(c) for c in feed.comments],
        like_count=feeds.like_count(feed.id),
        liked_by_me=feeds.has_liked(feed.id, viewer_id),
    )
    return {"feed": detail}


@router.post("/{feed_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    feed_id: int,
    body: CommentCreate,
    current_user: User = Depends(get_current_user),
    feeds: FeedService = Depends(get_feed_service),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    # 看不到的貼文也不能留言
    feed = _visible_feed(feed_id, current_user.id, feeds, resolver)
    comment = feeds.add_comment(feed.id, current_user.id, body.content)
    return {"comment": CommentRead.model_validate(comment)}


@router.post("/{feed_id}/like")
def like_feed(
    feed_id: int,
    current_user: User = Depends(get_current_user),
    feeds: FeedService = Depends(get_feed_service),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    feed = _visible_feed(feed_id, current_user.id, feeds, resolver)
    feeds.like(feed.id, current_user.id)
    return {"ok": True}


@router.delete("/{feed_id}/like")
def unlike_feed(
    feed_id: int,
    current_user: User = Depends(get_current_user),
    feeds: FeedService = Depends(get_feed_service),
):
    feeds.unlike(feed_id, current_user.id)
    return {"ok": True}
