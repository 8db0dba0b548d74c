# app/db/init_db.py

import logging

from sqlalchemy.orm import Session

from app.models.place import Place

logger = logging.getLogger(__name__)

# 貼文只能釘在這些預先定義好的地點
DEFAULT_PLACES = [
    {"name": "Changui Hall", "x_coord": 800, "y_coord": 620, "description": "Near the central plaza"},
    {"name": "Main Gate", "x_coord": 400, "y_coord": 950, "description": "Campus main gate"},
]


def seed_places(db: Session) -> int:
    """補上缺少的預設地點，回傳新增了幾個 (可以重複執行)"""
    existing = {name for (name,) in db.query(Place.name).all()}

    added = 0
    for data in DEFAULT_PLACES:
        if data["name"] in existing:
            continue
        db.add(Place(**data))
        added += 1

    if added:
        db.commit()
        logger.info("seeded %d places", added)
    return added
