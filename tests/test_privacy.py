import pytest

from app.models.feed import FeedStatus
from app.models.friendship import FriendshipStatus
from app.services.privacy import TIER_GRANTS

OWNER = 1
VIEWER = 2

NON_PUBLIC = [FeedStatus.FRIEND, FeedStatus.CLOSE_FRIEND, FeedStatus.PRIVATE]


class TestPublicAndAnonymous:

    @pytest.mark.parametrize("viewer", [None, OWNER, VIEWER])
    def test_public_is_visible_to_everyone(self, resolver, store, viewer):
        store.upsert(VIEWER, OWNER, FriendshipStatus.BLOCKED)
        assert resolver.can_view(viewer, OWNER, FeedStatus.PUBLIC) is True

    @pytest.mark.parametrize("tier", NON_PUBLIC)
    def test_anonymous_never_sees_restricted_tiers(self, resolver, tier):
        assert resolver.can_view(None, OWNER, tier) is False

    def test_public_does_not_touch_the_store(self, resolver):
        class ExplodingStore:
            def get(self, requester_id, target_id):
                raise AssertionError("store consulted for public content")

        resolver.store = ExplodingStore()
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.PUBLIC) is True


class TestOwner:

    @pytest.mark.parametrize("tier", list(FeedStatus))
    def test_owner_sees_own_content_without_edges(self, resolver, tier):
        assert resolver.can_view(OWNER, OWNER, tier) is True

    def test_private_is_owner_only_even_for_close_friends(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.CLOSE_FRIEND)
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.PRIVATE) is False


class TestRelationshipTiers:

    def test_no_edge_denies(self, resolver):
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.FRIEND) is False
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.CLOSE_FRIEND) is False

    def test_pending_grants_nothing(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.PENDING)
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.FRIEND) is False
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.CLOSE_FRIEND) is False

    def test_friend_edge(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.FRIEND)
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.FRIEND) is True
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.CLOSE_FRIEND) is False

    def test_close_friend_edge(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.CLOSE_FRIEND)
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.FRIEND) is True
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.CLOSE_FRIEND) is True

    @pytest.mark.parametrize("tier", NON_PUBLIC)
    def test_blocked_edge_denies_every_restricted_tier(self, resolver, store, tier):
        store.upsert(VIEWER, OWNER, FriendshipStatus.BLOCKED)
        assert resolver.can_view(VIEWER, OWNER, tier) is False

    def test_lookup_uses_viewer_to_owner_edge(self, resolver, store):
        # only the reverse edge exists
        store.upsert(OWNER, VIEWER, FriendshipStatus.CLOSE_FRIEND)
        assert resolver.can_view(VIEWER, OWNER, FeedStatus.FRIEND) is False
        assert resolver.can_view(OWNER, VIEWER, FeedStatus.FRIEND) is True

    def test_friendship_is_not_symmetric(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.FRIEND)
        assert resolver.can_view(OWNER, VIEWER, FeedStatus.FRIEND) is False


class TestMalformedInput:

    @pytest.mark.parametrize("tier", ["SECRET", "", None, 3])
    def test_unknown_tier_is_denied(self, resolver, store, tier):
        store.upsert(VIEWER, OWNER, FriendshipStatus.CLOSE_FRIEND)
        assert resolver.can_view(VIEWER, OWNER, tier) is False

    def test_tier_given_as_plain_string(self, resolver, store):
        store.upsert(VIEWER, OWNER, FriendshipStatus.FRIEND)
        assert resolver.can_view(VIEWER, OWNER, "FRIEND") is True
        assert resolver.can_view(None, OWNER, "PUBLIC") is True


def test_every_tier_has_a_rule():
    handled = {FeedStatus.PUBLIC, FeedStatus.PRIVATE} | set(TIER_GRANTS)
    assert handled == set(FeedStatus)


def test_every_status_is_classified():
    granting = set().union(*TIER_GRANTS.values())
    assert FriendshipStatus.BLOCKED not in granting
    assert FriendshipStatus.PENDING not in granting
    assert granting | {FriendshipStatus.BLOCKED, FriendshipStatus.PENDING} == set(FriendshipStatus)


class FakeFeed:
    def __init__(self, feed_id, author_id, status):
        self.id = feed_id
        self.author_id = author_id
        self.status = status


def test_filter_visible_keeps_order_and_drops_hidden(resolver, store):
    store.upsert(VIEWER, OWNER, FriendshipStatus.FRIEND)
    store.upsert(VIEWER, 3, FriendshipStatus.BLOCKED)
    items = [
        FakeFeed(1, OWNER, FeedStatus.CLOSE_FRIEND),
        FakeFeed(2, OWNER, FeedStatus.FRIEND),
        FakeFeed(3, 3, FeedStatus.FRIEND),
        FakeFeed(4, 3, FeedStatus.PUBLIC),
        FakeFeed(5, VIEWER, FeedStatus.PRIVATE),
        FakeFeed(6, 4, FeedStatus.FRIEND),
    ]

    visible = resolver.filter_visible(VIEWER, items)

    assert [f.id for f in visible] == [2, 4, 5]


def test_filter_visible_looks_up_each_owner_once(store):
    from app.services.privacy import VisibilityResolver

    calls = []

    class CountingStore:
        def get(self, requester_id, target_id):
            calls.append((requester_id, target_id))
            return store.get(requester_id, target_id)

    store.upsert(VIEWER, OWNER, FriendshipStatus.FRIEND)
    items = [FakeFeed(i, OWNER, FeedStatus.FRIEND) for i in range(5)]

    visible = VisibilityResolver(CountingStore()).filter_visible(VIEWER, items)

    assert len(visible) == 5
    assert calls == [(VIEWER, OWNER)]
