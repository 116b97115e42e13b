"""Integration tests for pet follow edges, derived counters and explore follow data."""
from __future__ import annotations

import os
from typing import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, func, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_follows.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_CLEANUP", "true")

from pawhub.database import Base, SessionLocal, engine  # noqa: E402
from pawhub.main import app  # noqa: E402
from pawhub.models import Follow, Notification, Pet, User  # noqa: E402
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


def _make_user(prefix: str = "user", *, display_name: str | None = None) -> User:
    with SessionLocal() as session:
        user = User(
            username=f"{prefix}-{uuid4().hex[:8]}",
            hashed_password="not-a-real-hash",
            display_name=display_name,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def _make_pet(owner: User, name: str, *, species: str = "Dog", breed: str | None = None) -> Pet:
    with SessionLocal() as session:
        pet = Pet(user_id=owner.id, name=name, species=species, breed=breed)
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


def _count(model, *criteria) -> int:
    with SessionLocal() as session:
        return session.scalar(select(func.count()).select_from(model).where(*criteria)) or 0


def test_follow_creates_single_edge_and_notifies_owner(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    target = _make_pet(owner, "Biscuit")
    fan_pet = _make_pet(fan, "Mochi")
    _act_as(fan)

    response = client.post(f"/follows/{target.id}", json={"follower_pet_id": str(fan_pet.id)})
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "followed"
    assert body["is_following"] is True
    assert body["followers_count"] == 1

    repeat = client.post(f"/follows/{target.id}")
    assert repeat.json()["status"] == "noop"
    assert repeat.json()["followers_count"] == 1
    assert _count(Follow, Follow.following_pet_id == target.id) == 1

    with SessionLocal() as session:
        notifications = list(session.scalars(select(Notification).where(Notification.user_id == owner.id)))
    assert len(notifications) == 1
    assert notifications[0].type == "follow"
    assert notifications[0].title == "Mochi started following your pet"
    assert notifications[0].target_pet_id == target.id


def test_unfollow_removes_edge_and_repeat_is_noop(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    target = _make_pet(owner, "Biscuit")
    _act_as(fan)
    client.post(f"/follows/{target.id}")

    response = client.delete(f"/follows/{target.id}")
    assert response.status_code == 200
    assert response.json()["status"] == "unfollowed"
    assert response.json()["followers_count"] == 0
    assert response.json()["is_following"] is False

    repeat = client.delete(f"/follows/{target.id}")
    assert repeat.json()["status"] == "noop"
    assert _count(Follow) == 0


def test_stats_derive_counts_from_edges(client):
    owner = _make_user("owner")
    others = [_make_user("other") for _ in range(3)]
    pet = _make_pet(owner, "Biscuit")
    other_pets = [_make_pet(other, f"Pet{index}") for index, other in enumerate(others)]

    for other in others:
        _act_as(other)
        client.post(f"/follows/{pet.id}")
    _act_as(owner)
    client.post(f"/follows/{other_pets[0].id}")
    client.post(f"/follows/{other_pets[1].id}")

    _act_as(None)
    stats = client.get(f"/follows/stats/{pet.id}").json()
    assert stats.pop("seq") >= 5
    assert stats == {
        "pet_id": str(pet.id),
        "followers_count": 3,
        "following_count": 2,
        "is_following": False,
    }

    _act_as(others[0])
    assert client.get(f"/follows/stats/{pet.id}").json()["is_following"] is True


def test_following_own_pet_is_allowed_without_notification(client):
    owner = _make_user("owner")
    pet = _make_pet(owner, "Biscuit")
    _act_as(owner)

    response = client.post(f"/follows/{pet.id}")
    assert response.json()["status"] == "followed"
    assert _count(Notification) == 0


def test_follow_unknown_pet_returns_404(client):
    _act_as(_make_user("fan"))
    assert client.post(f"/follows/{uuid4()}").status_code == 404


def test_follow_as_someone_elses_pet_is_forbidden(client):
    owner = _make_user("owner")
    fan = _make_user("fan")
    target = _make_pet(owner, "Biscuit")
    _act_as(fan)

    response = client.post(f"/follows/{target.id}", json={"follower_pet_id": str(target.id)})
    assert response.status_code == 403
    assert _count(Follow) == 0


def test_follow_requires_authentication(client):
    pet = _make_pet(_make_user("owner"), "Biscuit")
    assert client.post(f"/follows/{pet.id}").status_code == 401


def test_explore_batches_follow_state(client):
    owner = _make_user("owner")
    viewer = _make_user("viewer")
    dog = _make_pet(owner, "Rex", species="Dog", breed="Beagle")
    cat = _make_pet(owner, "Luna", species="Cat")
    _act_as(viewer)
    client.post(f"/follows/{dog.id}")

    everything = client.get("/pets/explore", params={"species": "All"}).json()["items"]
    by_id = {item["id"]: item for item in everything}
    assert by_id[str(dog.id)]["followers_count"] == 1
    assert by_id[str(dog.id)]["is_following"] is True
    assert by_id[str(cat.id)]["followers_count"] == 0
    assert by_id[str(cat.id)]["is_following"] is False

    cats = client.get("/pets/explore", params={"species": "Cat"}).json()["items"]
    assert [item["name"] for item in cats] == ["Luna"]

    beagles = client.get("/pets/explore", params={"q": "beag"}).json()["items"]
    assert [item["name"] for item in beagles] == ["Rex"]
