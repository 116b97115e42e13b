"""Integration tests for the post feed, likes and comments."""
from __future__ import annotations

import os
from typing import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, func, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_posts.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_CLEANUP", "true")

from pawhub.database import Base, SessionLocal, engine  # noqa: E402
from pawhub.main import app  # noqa: E402
from pawhub.models import Like, Notification, Pet, User  # noqa: E402
from pawhub.services import get_current_user, get_optional_user  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(delete(table))
        session.commit()
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(prefix: str = "user") -> User:
    with SessionLocal() as session:
        user = User(username=f"{prefix}-{uuid4().hex[:8]}", hashed_password="not-a-real-hash")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def _make_pet(owner: User, name: str) -> Pet:
    with SessionLocal() as session:
        pet = Pet(user_id=owner.id, name=name, species="Dog")
        session.add(pet)
        session.commit()
        session.refresh(pet)
        return pet


def _act_as(user: User | None) -> None:
    app.dependency_overrides[get_optional_user] = lambda: user
    if user is None:
        app.dependency_overrides.pop(get_current_user, None)
    else:
        app.dependency_overrides[get_current_user] = lambda: user


def _publish(client: TestClient, pet: Pet, content: str) -> dict:
    response = client.post("/posts", json={"pet_id": str(pet.id), "content": content})
    assert response.status_code == 201
    return response.json()


def _notifications_for(user: User) -> list[Notification]:
    with SessionLocal() as session:
        return list(session.scalars(select(Notification).where(Notification.user_id == user.id)))


def test_post_needs_text_or_media(client):
    owner = _make_user("owner")
    pet = _make_pet(owner, "Biscuit")
    _act_as(owner)

    response = client.post("/posts", json={"pet_id": str(pet.id), "content": "   "})
    assert response.status_code == 422

    media_only = client.post("/posts", json={"pet_id": str(pet.id), "media_urls": ["https://cdn.test/a.jpg"]})
    assert media_only.status_code == 201
    assert media_only.json()["media_urls"] == ["https://cdn.test/a.jpg"]


def test_cannot_post_as_another_users_pet(client):
    pet = _make_pet(_make_user("owner"), "Biscuit")
    _act_as(_make_user("intruder"))

    response = client.post("/posts", json={"pet_id": str(pet.id), "content": "hi"})
    assert response.status_code == 403


def test_like_is_idempotent_and_counts_edges(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    _act_as(owner)
    post = _publish(client, _make_pet(owner, "Biscuit"), "first walk")

    _act_as(fan)
    first = client.post(f"/posts/{post['id']}/like")
    second = client.post(f"/posts/{post['id']}/like")
    assert first.json() == second.json()
    assert second.json()["likes_count"] == 1
    assert second.json()["liked_by_user"] is True

    with SessionLocal() as session:
        assert session.scalar(select(func.count()).select_from(Like)) == 1

    unliked = client.delete(f"/posts/{post['id']}/like")
    assert unliked.json()["likes_count"] == 0
    assert unliked.json()["liked_by_user"] is False
    assert client.delete(f"/posts/{post['id']}/like").json()["likes_count"] == 0

    notifications = _notifications_for(owner)
    assert [item.type for item in notifications] == ["like"]
    assert notifications[0].target_post_id is not None


def test_liking_own_post_does_not_notify(client):
    owner = _make_user("owner")
    _act_as(owner)
    post = _publish(client, _make_pet(owner, "Biscuit"), "selfie")

    client.post(f"/posts/{post['id']}/like")
    assert _notifications_for(owner) == []


def test_feed_reports_counters_and_viewer_like_state(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    _act_as(owner)
    pet = _make_pet(owner, "Biscuit")
    older = _publish(client, pet, "older")
    newer = _publish(client, pet, "newer")
    client.post(f"/posts/{older['id']}/comments", json={"content": "cute"})

    _act_as(fan)
    client.post(f"/posts/{older['id']}/like")

    feed = client.get("/posts").json()["items"]
    assert [item["id"] for item in feed] == [newer["id"], older["id"]]
    assert feed[1]["likes_count"] == 1
    assert feed[1]["comments_count"] == 1
    assert feed[1]["liked_by_user"] is True
    assert feed[1]["pet"]["name"] == "Biscuit"
    assert feed[0]["liked_by_user"] is False

    _act_as(None)
    anonymous = client.get("/posts").json()["items"]
    assert all(item["liked_by_user"] is False for item in anonymous)


def test_following_feed_only_contains_followed_pets(client):
    owner = _make_user("owner")
    viewer = _make_user("viewer")
    _act_as(owner)
    followed_pet = _make_pet(owner, "Biscuit")
    other_pet = _make_pet(owner, "Pepper")
    followed_post = _publish(client, followed_pet, "hello")
    _publish(client, other_pet, "unseen")

    _act_as(viewer)
    assert client.get("/posts", params={"feed": "following"}).json()["items"] == []

    client.post(f"/follows/{followed_pet.id}")
    items = client.get("/posts", params={"feed": "following"}).json()["items"]
    assert [item["id"] for item in items] == [followed_post["id"]]


def test_pet_feed_requires_pet_id(client):
    assert client.get("/posts", params={"feed": "pet"}).status_code == 400


def test_comments_are_listed_oldest_first_and_notify_owner(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    _act_as(owner)
    post = _publish(client, _make_pet(owner, "Biscuit"), "bath day")

    _act_as(fan)
    fan_pet = _make_pet(fan, "Mochi")
    client.post(f"/posts/{post['id']}/comments", json={"content": "first", "pet_id": str(fan_pet.id)})
    client.post(f"/posts/{post['id']}/comments", json={"content": "second"})

    comments = client.get(f"/posts/{post['id']}/comments").json()["items"]
    assert [item["content"] for item in comments] == ["first", "second"]
    assert comments[0]["pet"]["name"] == "Mochi"

    titles = sorted(item.title for item in _notifications_for(owner))
    assert titles == ["Mochi commented on your post", "Someone commented on your post"]


def test_only_author_or_admin_deletes_comment(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    _act_as(owner)
    post = _publish(client, _make_pet(owner, "Biscuit"), "nap")

    _act_as(fan)
    comment = client.post(f"/posts/{post['id']}/comments", json={"content": "zzz"}).json()

    _act_as(owner)
    forbidden = client.delete(f"/posts/{post['id']}/comments/{comment['id']}")
    assert forbidden.status_code == 403

    _act_as(fan)
    assert client.delete(f"/posts/{post['id']}/comments/{comment['id']}").status_code == 204
    assert client.get(f"/posts/{post['id']}/comments").json()["items"] == []


def test_like_unknown_post_returns_404(client):
    _act_as(_make_user("fan"))
    assert client.post(f"/posts/{uuid4()}/like").status_code == 404
