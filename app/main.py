# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import CampusFeedError
from app.core.logging import setup_logging
from app.db.base_class import Base
from app.db.init_db import seed_places
from app.db.session import SessionLocal, engine

# 🔥 所有 Model 都要先 import，SQLAlchemy 才知道要建哪些表
from app.models.user import User  # noqa: F401
from app.models.friendship import Friendship  # noqa: F401
from app.models.place import Place  # noqa: F401
from app.models.feed import Feed, Comment, FeedLike  # noqa: F401

from app.routers import auth, feeds, friendships, places

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 啟動時自動建立缺少的表格，再補上預設的校園地點
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_places(db)
    finally:
        db.close()
    logger.info("Campus Feed API ready")
    yield


app = FastAPI(title="Campus Feed API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampusFeedError)
async def campus_feed_error_handler(request: Request, exc: CampusFeedError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(friendships.router, prefix="/api/friendships", tags=["friendships"])
app.include_router(places.router, prefix="/api/places", tags=["places"])
app.include_router(feeds.router, prefix="/api/feeds", tags=["feeds"])


@app.get("/")
def read_root():
    return {"message": "Campus Feed API is running!"}
