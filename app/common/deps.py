# app/common/deps.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models.user import User
from app.services.feed_service import FeedService
from app.services.friendship_service import FriendshipService
from app.services.privacy import VisibilityResolver
from app.services.relationship_store import SqlRelationshipStore

# 定義登入網址
# auto_error=False：沒帶 token 也放行，由各個路由自己決定要不要登入
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_relationship_store(db: Session = Depends(get_db)) -> SqlRelationshipStore:
    return SqlRelationshipStore(db=db)


def get_friendship_service(
    store: SqlRelationshipStore = Depends(get_relationship_store),
) -> FriendshipService:
    return FriendshipService(store)


def get_visibility_resolver(
    store: SqlRelationshipStore = Depends(get_relationship_store),
) -> VisibilityResolver:
    return VisibilityResolver(store)


def get_feed_service(db: Session = Depends(get_db)) -> FeedService:
    return FeedService(db=db)


def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    先看 session cookie，再看 Bearer header。
    其中一個壞掉 (過期、竄改) 就換下一個試；全部失敗才當作匿名訪客。
    """
    # 🔥 cookie 優先：瀏覽器可能同時帶著過期的 Bearer 和有效的 cookie
    candidates = [request.cookies.get(settings.COOKIE_NAME), token]

    for candidate in candidates:
        if not candidate:
            continue
        user_id = decode_access_token(candidate)
        if user_id is None:
            continue
        user = db.query(User).filter(User.id == user_id).first()
        if user is not None:
            return user
    return None


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
