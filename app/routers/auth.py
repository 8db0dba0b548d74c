# app/routers/auth.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.common.deps import get_current_user
from app.core.config import settings
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.session import get_db
from app.models.user import User, UserCredentials, UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _issue_session(response: Response, user: User) -> dict:
    access_token = create_access_token(user.id)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict" if settings.COOKIE_SECURE else "lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return {
        "user": UserRead.model_validate(user),
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: UserCredentials, response: Response, db: Session = Depends(get_db)):
    # 帳號重複就擋下來
    if db.query(User).filter(User.username == body.username).first():
        raise HTTPException(status_code=409, detail="Username already taken")

    user = User(username=body.username, hashed_password=get_password_hash(body.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username already taken")
    db.refresh(user)

    logger.info("registered user %s (%s)", user.id, user.username)
    return _issue_session(response, user)


@router.post("/login")
def login(body: UserCredentials, response: Response, db: Session = Depends(get_db)):
    user = _authenticate(db, body.username, body.password)
    return _issue_session(response, user)


# OAuth2 表單登入 (給 /docs 的 Authorize 按鈕用)
@router.post("/token")
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = _authenticate(db, form_data.username, form_data.password)
    return {"access_token": create_access_token(user.id), "token_type": "bearer"}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response, current_user: User = Depends(get_current_user)):
    response.delete_cookie(settings.COOKIE_NAME, path="/")


@router.get("/me")
def read_users_me(current_user: User = Depends(get_current_user)):
    return {"user": UserRead.model_validate(current_user)}
