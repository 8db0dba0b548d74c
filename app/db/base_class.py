# app/db/base_class.py
from datetime import datetime, timezone
from sqlalchemy.orm import as_declarative, declared_attr


@as_declarative()
class Base:
    # 自動將 class name 轉為小寫作為 table name
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
