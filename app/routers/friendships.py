# app/routers/friendships.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.common.deps import get_current_user, get_friendship_service
from app.db.session import get_db
from app.models.friendship import Edge, Friendship, FriendshipStatus, TargetIn
from app.models.user import User
from app.services.friendship_service import FriendshipService

router = APIRouter()


def _ensure_target(db: Session, target_id: int):
    if db.query(User.id).filter(User.id == target_id).first() is None:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("")
def list_friendships(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    # 我發出的關係 = 我怎麼分類別人
    rows = db.query(Friendship).filter(
        Friendship.requester_id == current_user.id,
    ).order_by(Friendship.updated_at.desc()).all()
    return {"friendships": [Edge.model_validate(r) for r in rows]}


@router.get("/requests")
def list_friend_requests(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = db.query(Friendship).filter(
        Friendship.target_id == current_user.id,
        Friendship.status == FriendshipStatus.PENDING,
    ).order_by(Friendship.created_at.asc()).all()

    return {
        "requests": [
            {
                "requester_id": r.requester_id,
                "username": r.requester.username,
                "created_at": r.created_at,
            }
            for r in rows
        ]
    }


@router.post("/request")
def request_friendship(
    body: TargetIn,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
    db: Session = Depends(get_db),
):
    _ensure_target(db, body.target_id)
    edge = service.request(current_user.id, body.target_id)
    return {"friendship": edge}


@router.post("/accept")
def accept_friendship(
    body: TargetIn,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    # 👈 注意：這裡的 target_id 是「當初送邀請的人」，我才是這條關係的 target
    updated = service.accept(body.target_id, current_user.id)
    return {"updated": updated}


@router.post("/close-friend")
def elevate_friendship(
    body: TargetIn,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
    db: Session = Depends(get_db),
):
    _ensure_target(db, body.target_id)
    edge = service.elevate(current_user.id, body.target_id)
    return {"friendship": edge}


@router.post("/block")
def block_user(
    body: TargetIn,
    current_user: User = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
    db: Session = Depends(get_db),
):
    _ensure_target(db, body.target_id)
    edge = service.block(current_user.id, body.target_id)
    return {"friendship": edge}
