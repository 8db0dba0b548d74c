# app/core/config.py

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./campus_feed.db"

    # --- JWT 登入設定 (正式上線請用 .env 覆蓋 SECRET_KEY) ---
    SECRET_KEY: str = "CHANGE_THIS_TO_A_SUPER_SECRET_KEY"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    COOKIE_NAME: str = "campus_feed_session"
    COOKIE_SECURE: bool = False

    # 空的 list = 允許所有來源
    ALLOWED_ORIGINS: List[str] = []

    LOG_LEVEL: str = "INFO"

    # 圖片的公開網址前綴：image_key 會接在後面
    MEDIA_BASE_URL: str = "http://localhost:9000/campus-feed"

    # 地圖上只顯示最近幾小時內的貼文
    PLACE_FEED_WINDOW_HOURS: int = 24

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
