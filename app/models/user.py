# app/models/user.py

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from pydantic import BaseModel, ConfigDict, Field

from app.db.base_class import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(32), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class UserCredentials(BaseModel):
    username: str = Field(min_length=3, max_length=32, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(min_length=8, max_length=64)


class UserRead(BaseModel):
    id: int
    username: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthorRead(BaseModel):
    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)
