# app/services/privacy.py

import logging
from operator import attrgetter
from typing import Callable, Iterable, List, Optional

from app.models.feed import FeedStatus
from app.models.friendship import Edge, FriendshipStatus
from app.services.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)

# 每個「需要關係」的可見等級，對應到哪些關係狀態可以看
# PUBLIC 和 PRIVATE 完全不查關係表
TIER_GRANTS = {
    FeedStatus.FRIEND: frozenset({FriendshipStatus.FRIEND, FriendshipStatus.CLOSE_FRIEND}),
    FeedStatus.CLOSE_FRIEND: frozenset({FriendshipStatus.CLOSE_FRIEND}),
}


class VisibilityResolver:
    """
    決定「這個人能不能看這篇貼文」的唯一地方。

    🔥 只查一條關係：(requester=viewer, target=owner)。
    兩端千萬不要寫反，寫反會變成用 viewer 自己給別人的權限來看別人的貼文。

    找不到關係、可見等級格式不對，一律回傳 False (看不到)，不會丟例外。
    判斷順序有意義，不要隨便調換。
    """

    def __init__(self, store: RelationshipStore):
        self.store = store

    def can_view(self, viewer_id: Optional[int], owner_id: int, tier) -> bool:
        return self._decide(viewer_id, owner_id, tier, self.store.get)

    def filter_visible(
        self,
        viewer_id: Optional[int],
        items: Iterable,
        owner_of: Callable = attrgetter("author_id"),
        tier_of: Callable = attrgetter("status"),
    ) -> List:
        """保留看得到的項目 (順序不變)，同一個作者只查一次關係。"""
        edges = {}

        def lookup(requester_id, target_id):
            if target_id not in edges:
                edges[target_id] = self.store.get(requester_id, target_id)
            return edges[target_id]

        return [
            item for item in items
            if self._decide(viewer_id, owner_of(item), tier_of(item), lookup)
        ]

    @staticmethod
    def _coerce_tier(tier) -> Optional[FeedStatus]:
        try:
            return FeedStatus(tier)
        except ValueError:
            logger.warning("unknown visibility tier %r, denying", tier)
            return None

    def _decide(
        self,
        viewer_id: Optional[int],
        owner_id: int,
        tier,
        lookup: Callable[[int, int], Optional[Edge]],
    ) -> bool:
        tier = self._coerce_tier(tier)
        if tier is None:
            return False

        if tier == FeedStatus.PUBLIC:
            return True
        if viewer_id is None:
            return False
        if viewer_id == owner_id:
            return True
        if tier == FeedStatus.PRIVATE:
            return False

        edge = lookup(viewer_id, owner_id)
        if edge is None:
            return False
        # 🔥 封鎖優先於一切授權
        if edge.status == FriendshipStatus.BLOCKED:
            logger.debug("viewer %s blocked toward %s", viewer_id, owner_id)
            return False

        granted = TIER_GRANTS.get(tier)
        if granted is None:
            return False
        return edge.status in granted
