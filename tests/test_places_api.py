from datetime import timedelta

import pytest

from app.db.base_class import utcnow
from app.db.init_db import DEFAULT_PLACES, seed_places
from app.models.feed import Feed, FeedStatus
from app.models.place import Place


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def viewer(make_user):
    return make_user("viewer")


def add_feed(db_session, author_id, place_id, status, title, age=None):
    feed = Feed(author_id=author_id, place_id=place_id, title=title, content="...", status=status)
    if age is not None:
        feed.created_at = utcnow() - age
    db_session.add(feed)
    db_session.commit()
    return feed


def test_list_places_by_name(client, db_session, place):
    db_session.add(Place(name="Library", x_coord=1, y_coord=2))
    db_session.commit()

    names = [p["name"] for p in client.get("/api/places").json()["places"]]

    assert names == ["Library", "Main Gate"]


def test_create_place(client, owner):
    _, headers = owner
    body = {"name": "Library", "x_coord": 10, "y_coord": 20}

    res = client.post("/api/places", json=body, headers=headers)
    assert res.status_code == 201
    assert res.json()["place"]["description"] is None

    assert client.post("/api/places", json=body, headers=headers).status_code == 409


def test_create_place_requires_auth(client):
    res = client.post("/api/places", json={"name": "Library", "x_coord": 1, "y_coord": 1})
    assert res.status_code == 401


def test_place_feeds_are_filtered_by_visibility(client, db_session, owner, viewer, place):
    owner_id, _ = owner
    viewer_id, viewer_headers = viewer

    add_feed(db_session, owner_id, place.id, FeedStatus.PUBLIC, "public")
    add_feed(db_session, owner_id, place.id, FeedStatus.FRIEND, "friends")
    add_feed(db_session, owner_id, place.id, FeedStatus.PRIVATE, "private")
    add_feed(db_session, viewer_id, place.id, FeedStatus.PRIVATE, "mine")
    add_feed(db_session, owner_id, place.id, FeedStatus.PUBLIC, "stale", age=timedelta(hours=30))

    res = client.get(f"/api/places/{place.id}/feeds", headers=viewer_headers)

    assert res.status_code == 200
    feeds = res.json()["feeds"]
    assert [f["title"] for f in feeds] == ["mine", "public"]
    assert feeds[0]["comment_count"] == 0
    assert feeds[0]["like_count"] == 0


def test_place_feeds_include_friend_tier_once_accepted(client, db_session, owner, viewer, place):
    owner_id, owner_headers = owner
    viewer_id, viewer_headers = viewer
    add_feed(db_session, owner_id, place.id, FeedStatus.FRIEND, "friends")

    client.post("/api/friendships/request", json={"target_id": owner_id}, headers=viewer_headers)
    client.post("/api/friendships/accept", json={"target_id": viewer_id}, headers=owner_headers)

    feeds = client.get(f"/api/places/{place.id}/feeds", headers=viewer_headers).json()["feeds"]
    assert [f["title"] for f in feeds] == ["friends"]


def test_place_feeds_unknown_place(client, viewer):
    _, headers = viewer
    assert client.get("/api/places/999/feeds", headers=headers).status_code == 404


def test_place_feeds_require_auth(client, place):
    assert client.get(f"/api/places/{place.id}/feeds").status_code == 401


def test_seed_places_is_idempotent(db_session):
    assert seed_places(db_session) == len(DEFAULT_PLACES)
    assert seed_places(db_session) == 0
    assert db_session.query(Place).count() == len(DEFAULT_PLACES)
