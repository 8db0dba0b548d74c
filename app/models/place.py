# app/models/place.py

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime
from pydantic import BaseModel, ConfigDict, Field

from app.db.base_class import Base, utcnow


class Place(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    x_coord = Column(Integer, nullable=False)
    y_coord = Column(Integer, nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class PlaceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    x_coord: int
    y_coord: int
    description: Optional[str] = Field(default=None, max_length=255)


class PlaceRead(BaseModel):
    id: int
    name: str
    x_coord: int
    y_coord: int
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
