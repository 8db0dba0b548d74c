# app/services/friendship_service.py

import logging

from app.core.exceptions import InvalidOperand
from app.models.friendship import Edge, FriendshipStatus
from app.services.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)


class FriendshipService:
    """
    唯一會寫入關係的地方 (邀請 / 接受 / 設為摯友 / 封鎖)。

    每個操作只碰 (requester_id, target_id) 這一條關係，反方向那條完全不看也不改。
    找不到關係不算錯：`accept` 回傳改了幾筆 (0 或 1)，其他操作會直接建立。
    自己對自己一律丟 InvalidOperand。
    """

    def __init__(self, store: RelationshipStore):
        self.store = store

    @staticmethod
    def _check_pair(requester_id: int, target_id: int):
        if requester_id == target_id:
            raise InvalidOperand(requester_id)

    def request(self, requester_id: int, target_id: int) -> Edge:
        self._check_pair(requester_id, target_id)

        # 已經在等對方接受：什麼都不做，直接回傳原本那筆
        existing = self.store.get(requester_id, target_id)
        if existing is not None and existing.status == FriendshipStatus.PENDING:
            return existing

        # 重新邀請 = 解除自己下的封鎖
        edge = self.store.upsert(requester_id, target_id, FriendshipStatus.PENDING)
        logger.info("friend request %s -> %s (was %s)", requester_id, target_id,
                    existing.status.value if existing else "none")
        return edge

    def accept(self, requester_id: int, target_id: int) -> int:
        """
        由 `target_id` 這個人按下接受。只有 PENDING 會變成 FRIEND；
        重複按、或前端畫面過期送來的接受，什麼都不改，回傳 0。
        """
        self._check_pair(requester_id, target_id)

        # 條件式更新：只有狀態還是 PENDING 才會改
        updated = self.store.update_if_status(
            requester_id, target_id,
            FriendshipStatus.PENDING, FriendshipStatus.FRIEND,
        )
        if updated:
            logger.info("friend request %s -> %s accepted", requester_id, target_id)
        else:
            logger.debug("accept %s -> %s had no pending edge", requester_id, target_id)
        return updated

    def elevate(self, owner_id: int, target_id: int) -> Edge:
        # 不需要先是 FRIEND，邀請還沒被接受也可以設
        self._check_pair(owner_id, target_id)

        edge = self.store.upsert(owner_id, target_id, FriendshipStatus.CLOSE_FRIEND)
        logger.info("close friend %s -> %s", owner_id, target_id)
        return edge

    def block(self, issuer_id: int, target_id: int) -> Edge:
        self._check_pair(issuer_id, target_id)

        edge = self.store.upsert(issuer_id, target_id, FriendshipStatus.BLOCKED)
        logger.info("block %s -> %s", issuer_id, target_id)
        return edge
