# app/core/security.py

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings

# 設定密碼加密方式為 bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _truncate(password: str) -> str:
    # Bcrypt 有一個硬性限制：密碼不能超過 72 bytes
    # 超過就截斷 (保留 1 byte)，避免長密碼讓伺服器崩潰
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 71:
        return password_bytes[:71].decode("utf-8", errors="ignore")
    return password


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(_truncate(password))


def create_access_token(user_id: int, expires_delta: Union[timedelta, None] = None) -> str:
    """
    製作 JWT 識別證 (Token)，`sub` 放的是 user id (字串)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """
    解開 Token：成功回傳 user id，格式錯誤或過期回傳 None
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except ValueError:
        return None
