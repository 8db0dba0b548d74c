# app/services/relationship_store.py

"""
關係 (friendship edge) 的存取層。

每條關係用 (requester_id, target_id) 這組有順序的 key 來識別，一組 key 最多一筆。
寫入只有 `upsert` 和 `update_if_status` 兩種，都是針對這組 key 的單一原子操作，
同時有兩個請求改同一條關係也不會多出重複的資料。
"""

import logging
import threading
from typing import Dict, Optional, Protocol, Tuple

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.base_class import utcnow
from app.models.friendship import Edge, Friendship, FriendshipStatus

logger = logging.getLogger(__name__)

# 支援 INSERT ... ON CONFLICT DO UPDATE 的資料庫
_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class RelationshipStore(Protocol):
    def get(self, requester_id: int, target_id: int) -> Optional[Edge]:
        ...

    def upsert(self, requester_id: int, target_id: int, status: FriendshipStatus) -> Edge:
        ...

    def update_if_status(
        self,
        requester_id: int,
        target_id: int,
        expected: FriendshipStatus,
        new: FriendshipStatus,
    ) -> int:
        ...


class SqlRelationshipStore:

    def __init__(self, db: Session):
        self.db = db

    def _row(self, requester_id: int, target_id: int) -> Optional[Friendship]:
        return self.db.query(Friendship).filter(
            Friendship.requester_id == requester_id,
            Friendship.target_id == target_id,
        ).first()

    def get(self, requester_id: int, target_id: int) -> Optional[Edge]:
        row = self._row(requester_id, target_id)
        if row is None:
            return None
        return Edge.model_validate(row)

    def upsert(self, requester_id: int, target_id: int, status: FriendshipStatus) -> Edge:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        # SQLite / PostgreSQL 用一句 ON CONFLICT 搞定；其他資料庫先查再寫
        if insert is None:
            self._upsert_without_on_conflict(requester_id, target_id, status)
        else:
            now = utcnow()
            stmt = insert(Friendship).values(
                requester_id=requester_id,
                target_id=target_id,
                status=status,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["requester_id", "target_id"],
                set_={"status": status, "updated_at": now},
            )
            self.db.execute(stmt)
            self.db.commit()

        return self.get(requester_id, target_id)

    def _upsert_without_on_conflict(self, requester_id, target_id, status):
        row = self._row(requester_id, target_id)
        if row is None:
            self.db.add(Friendship(requester_id=requester_id, target_id=target_id, status=status))
            try:
                self.db.commit()
                return
            except IntegrityError:
                # 別的請求搶先建立了同一組 (requester, target)，改走更新
                self.db.rollback()
                logger.debug("concurrent insert on %s -> %s, retrying as update", requester_id, target_id)
                row = self._row(requester_id, target_id)

        row.status = status
        self.db.commit()

    def update_if_status(self, requester_id, target_id, expected, new) -> int:
        result = self.db.execute(
            update(Friendship)
            .where(
                Friendship.requester_id == requester_id,
                Friendship.target_id == target_id,
                Friendship.status == expected,
            )
            .values(status=new, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount


class InMemoryRelationshipStore:
    """
    不接資料庫的版本：用 dict 存關係 (測試、離線計算用)。
    寫入時上鎖，保持跟資料庫版一樣的原子性。
    """

    def __init__(self):
        self._edges: Dict[Tuple[int, int], Edge] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._edges)

    def get(self, requester_id: int, target_id: int) -> Optional[Edge]:
        return self._edges.get((requester_id, target_id))

    def upsert(self, requester_id: int, target_id: int, status: FriendshipStatus) -> Edge:
        edge = Edge(
            requester_id=requester_id,
            target_id=target_id,
            status=status,
            updated_at=utcnow(),
        )
        with self._lock:
            self._edges[(requester_id, target_id)] = edge
        return edge

    def update_if_status(self, requester_id, target_id, expected, new) -> int:
        key = (requester_id, target_id)
        with self._lock:
            edge = self._edges.get(key)
            if edge is None or edge.status != expected:
                return 0
            self._edges[key] = edge.model_copy(update={"status": new, "updated_at": utcnow()})
            return 1
