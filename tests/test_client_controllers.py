"""Tests for the client controllers, the remote client and the realtime hub."""
from __future__ import annotations

import asyncio
import json
import os
from datetime import datetime, timezone
from typing import Iterator
from uuid import UUID, uuid4

import httpx
import pytest
from sqlalchemy import delete, func, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_client_controllers.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_CLEANUP", "true")

from pawhub.client import (  # noqa: E402
    AdminDashboard,
    ClientSession,
    CommentsController,
    FeedController,
    FollowController,
    NotificationsController,
    RemoteClient,
    RemoteError,
    StoriesController,
    TogglePhase,
)
from pawhub.database import Base, SessionLocal, engine  # noqa: E402
from pawhub.main import app  # noqa: E402
from pawhub.models import Follow, Like, Pet, Post, User  # noqa: E402
from pawhub.schemas import (  # noqa: E402
    AnalyticsDataset,
    CommentResponse,
    FollowActionResponse,
    FollowStatsResponse,
    NotificationResponse,
    PetFollowEvent,
    PostEngagementEvent,
    PostFeedResponse,
    PostResponse,
    StoryGroupResponse,
    TableChangeEvent,
)
from pawhub.services import get_current_user, get_optional_user  # noqa: E402
from pawhub.services.realtime import RealtimeHub  # noqa: E402

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class StubRemote:
    """In-memory stand-in for :class:`RemoteClient` with scriptable failures."""

    def __init__(self) -> None:
        self.fail: set[str] = set()
        self.calls: list[str] = []
        self.followers = 10
        self.is_following = False
        self.posts: list[PostResponse] = []
        self.comment_store: list[CommentResponse] = []
        self.dataset = AnalyticsDataset()
        self.groups: list[StoryGroupResponse] = []
        self.inbox: list[NotificationResponse] = []
        self.observed: list[tuple[bool, int]] = []
        self.observe = None
        self.seq = 0
        self.gate: asyncio.Event | None = None

    async def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.observe is not None:
            self.observed.append(self.observe())
        await asyncio.sleep(0)
        if name in self.fail:
            raise RemoteError(500, f"{name} failed")

    async def follow_stats(self, pet_id: UUID) -> FollowStatsResponse:
        await self._record("follow_stats")
        return FollowStatsResponse(
            pet_id=pet_id,
            followers_count=self.followers,
            following_count=3,
            is_following=self.is_following,
            seq=self.seq,
        )

    async def follow(self, pet_id: UUID, *, follower_pet_id: UUID | None = None) -> FollowActionResponse:
        if self.gate is not None:
            await self.gate.wait()
        await self._record("follow")
        self.followers += 1
        return FollowActionResponse(
            pet_id=pet_id, followers_count=self.followers, following_count=3, is_following=True, status="followed"
        )

    async def unfollow(self, pet_id: UUID) -> FollowActionResponse:
        await self._record("unfollow")
        self.followers -= 1
        return FollowActionResponse(
            pet_id=pet_id, followers_count=self.followers, following_count=3, is_following=False, status="unfollowed"
        )

    async def feed_page(self, *, feed: str = "all", pet_id: UUID | None = None) -> PostFeedResponse:
        await self._record("feed")
        return PostFeedResponse(items=list(self.posts), seq=self.seq)

    async def like(self, post_id: UUID, *, pet_id: UUID | None = None) -> None:
        await self._record("like")

    async def unlike(self, post_id: UUID) -> None:
        await self._record("unlike")

    async def comments(self, post_id: UUID) -> list[CommentResponse]:
        await self._record("comments")
        return list(self.comment_store)

    async def add_comment(self, post_id: UUID, content: str, *, pet_id: UUID | None = None) -> CommentResponse:
        await self._record("add_comment")
        return _comment(post_id, content)

    async def delete_comment(self, post_id: UUID, comment_id: UUID) -> None:
        await self._record("delete_comment")

    async def story_groups(self) -> list[StoryGroupResponse]:
        await self._record("story_groups")
        return [group.model_copy(deep=True) for group in self.groups]

    async def mark_story_viewed(self, story_id: UUID) -> None:
        await self._record("mark_story_viewed")

    async def notifications(self) -> list[NotificationResponse]:
        await self._record("notifications")
        return list(self.inbox)

    async def unread_count(self) -> int:
        await self._record("unread_count")
        return sum(1 for item in self.inbox if not item.is_read)

    async def mark_all_read(self) -> None:
        await self._record("mark_all_read")

    async def analytics_dataset(self) -> AnalyticsDataset:
        await self._record("analytics_dataset")
        return self.dataset


def _session(role: str = "user") -> ClientSession:
    return ClientSession(user_id=uuid4(), access_token="token", active_pet_id=uuid4(), role=role)


def _post(*, likes: int = 0, liked: bool = False, comments: int = 0) -> PostResponse:
    return PostResponse(
        id=uuid4(),
        pet_id=uuid4(),
        user_id=uuid4(),
        content="hello",
        likes_count=likes,
        comments_count=comments,
        liked_by_user=liked,
        created_at=NOW,
    )


def _comment(post_id: UUID, content: str) -> CommentResponse:
    return CommentResponse(id=uuid4(), post_id=post_id, user_id=uuid4(), content=content, created_at=NOW)


def test_follow_controller_rolls_back_on_backend_error():
    remote = StubRemote()
    errors: list[RemoteError] = []
    controller = FollowController(remote, _session(), uuid4(), on_error=errors.append)
    remote.observe = lambda: (controller.is_following, controller.followers_count)
    remote.fail.add("follow")

    async def scenario():
        await controller.load()
        assert (controller.is_following, controller.followers_count) == (False, 10)
        assert controller.following_count == 3
        return await controller.follow()

    result = asyncio.run(scenario())

    assert remote.observed[-1] == (True, 11)
    assert result.phase is TogglePhase.ROLLED_BACK
    assert (controller.is_following, controller.followers_count) == (False, 10)
    assert [error.status_code for error in errors] == [500]


def test_follow_controller_confirms_and_ignores_redundant_calls():
    remote = StubRemote()
    controller = FollowController(remote, _session(), uuid4())

    async def scenario():
        await controller.load()
        first = await controller.follow()
        second = await controller.follow()
        return first, second

    first, second = asyncio.run(scenario())

    assert first.phase is TogglePhase.CONFIRMED
    assert second is None
    assert remote.calls.count("follow") == 1
    assert (controller.is_following, controller.followers_count) == (True, 11)

    assert asyncio.run(controller.unfollow()).phase is TogglePhase.CONFIRMED
    assert (controller.is_following, controller.followers_count) == (False, 10)


def test_follow_controller_is_inert_for_anonymous_sessions():
    remote = StubRemote()
    remote.is_following = True
    controller = FollowController(remote, ClientSession(), uuid4())

    asyncio.run(controller.load())
    assert controller.is_following is False
    assert asyncio.run(controller.toggle()) is None
    assert remote.calls == ["follow_stats"]


def test_follow_controller_applies_realtime_counts_in_sequence():
    pet_id = uuid4()
    controller = FollowController(StubRemote(), _session(), pet_id)
    asyncio.run(controller.load())

    assert controller.handle_event(PetFollowEvent(pet_id=pet_id, followers_count=14, seq=5).model_dump(mode="json"))
    assert controller.followers_count == 14
    assert not controller.handle_event({"type": "pet.follow", "pet_id": str(pet_id), "followers_count": 1, "seq": 4})
    assert not controller.handle_event({"type": "pet.follow", "pet_id": str(uuid4()), "followers_count": 1, "seq": 9})
    assert not controller.handle_event({"type": "pong"})
    assert controller.followers_count == 14


def test_feed_like_success_and_failure():
    remote = StubRemote()
    liked_post, other_post = _post(), _post(likes=5, liked=True)
    remote.posts = [liked_post, other_post]
    errors: list[RemoteError] = []
    controller = FeedController(remote, _session(), on_error=errors.append)

    async def scenario():
        await controller.load()
        confirmed = await controller.like(liked_post.id)
        remote.fail.add("unlike")
        rolled_back = await controller.unlike(other_post.id)
        return confirmed, rolled_back

    confirmed, rolled_back = asyncio.run(scenario())

    posts = {post.id: post for post in controller.posts}
    assert confirmed.phase is TogglePhase.CONFIRMED
    assert (posts[liked_post.id].liked_by_user, posts[liked_post.id].likes_count) == (True, 1)
    assert rolled_back.phase is TogglePhase.ROLLED_BACK
    assert (posts[other_post.id].liked_by_user, posts[other_post.id].likes_count) == (True, 5)
    assert len(errors) == 1


def test_feed_handles_engagement_and_table_events():
    remote = StubRemote()
    post = _post(likes=2, comments=1)
    remote.posts = [post]
    controller = FeedController(remote, _session())

    async def scenario():
        await controller.load()
        applied = await controller.handle_event(
            PostEngagementEvent(post_id=post.id, likes_count=4, comments_count=3, seq=2).model_dump(mode="json")
        )
        stale = await controller.handle_event(
            PostEngagementEvent(post_id=post.id, likes_count=1, comments_count=0, seq=1).model_dump(mode="json")
        )
        remote.posts = [_post(), post.model_copy(update={"likes_count": 4, "comments_count": 3})]
        reloaded = await controller.handle_event(
            TableChangeEvent(table="posts", event="INSERT", seq=3).model_dump(mode="json")
        )
        return applied, stale, reloaded

    applied, stale, reloaded = asyncio.run(scenario())

    assert (applied, stale, reloaded) == (True, False, True)
    assert remote.calls.count("feed") == 2
    assert len(controller.posts) == 2
    current = next(item for item in controller.posts if item.id == post.id)
    assert (current.likes_count, current.comments_count) == (4, 3)


def test_comments_controller_appends_and_reports_failures():
    remote = StubRemote()
    post_id = uuid4()
    existing = _comment(post_id, "first")
    remote.comment_store = [existing]
    errors: list[RemoteError] = []
    controller = CommentsController(remote, _session(), post_id, on_error=errors.append)

    async def scenario():
        await controller.load()
        added = await controller.add("second")
        remote.fail.add("delete_comment")
        deleted = await controller.delete(existing.id)
        return added, deleted

    added, deleted = asyncio.run(scenario())

    assert [comment.content for comment in controller.comments] == ["first", "second"]
    assert added is not None
    assert deleted is False
    assert len(errors) == 1


def test_dashboard_is_admin_only_and_reloads_on_order_changes():
    remote = StubRemote()
    remote.dataset = AnalyticsDataset.model_validate(
        {"orders": [{"id": str(uuid4()), "created_at": "2024-03-14T00:00:00+00:00", "total_amount": 40}]}
    )

    assert asyncio.run(AdminDashboard(remote, _session()).load()) is None
    assert remote.calls == []

    dashboard = AdminDashboard(remote, _session("admin"), clock=lambda: NOW)

    async def scenario():
        report = await dashboard.load()
        ignored = await dashboard.handle_event({"type": "table.changed", "table": "posts", "event": "INSERT", "seq": 1})
        refreshed = await dashboard.handle_event(
            {"type": "table.changed", "table": "orders", "event": "UPDATE", "seq": 2}
        )
        return report, ignored, refreshed

    report, ignored, refreshed = asyncio.run(scenario())

    assert report.total_revenue == pytest.approx(40)
    assert (ignored, refreshed) == (False, True)
    assert remote.calls == ["analytics_dataset", "analytics_dataset"]


def test_notifications_controller_applies_pushes():
    controller = NotificationsController(StubRemote(), _session())
    pushed = controller.handle_push(
        {
            "type": "notification.created",
            "notification": {
                "id": str(uuid4()),
                "user_id": str(uuid4()),
                "type": "like",
                "title": "Mochi liked your post",
                "is_read": False,
                "created_at": NOW.isoformat(),
            },
        }
    )
    assert pushed is not None
    assert controller.unread_count == 1

    controller.handle_push({"type": "notification.read_all"})
    assert controller.unread_count == 0
    assert controller.items[0].is_read is True


def test_notifications_controller_drops_malformed_pushes():
    controller = NotificationsController(StubRemote(), _session())

    assert controller.handle_push({"type": "notification.created"}) is None
    assert controller.handle_push({"type": "notification.created", "notification": {"id": "nope"}}) is None
    assert controller.handle_push(["notification.created"]) is None
    assert controller.items == []
    assert controller.unread_count == 0


def test_mark_all_read_failure_reaches_error_callback():
    remote = StubRemote()
    remote.inbox = [
        NotificationResponse(id=uuid4(), user_id=uuid4(), type="follow", title="hi", is_read=False, created_at=NOW)
    ]
    remote.fail.add("mark_all_read")
    errors: list[RemoteError] = []
    controller = NotificationsController(remote, _session(), on_error=errors.append)

    async def scenario():
        await controller.load()
        return await controller.mark_all_read()

    assert asyncio.run(scenario()) is False
    assert controller.unread_count == 1
    assert [error.status_code for error in errors] == [500]


def test_story_view_failure_reaches_error_callback():
    story_id = uuid4()
    pet = {"id": str(uuid4()), "user_id": str(uuid4()), "name": "Mochi", "species": "Cat", "created_at": NOW.isoformat()}
    remote = StubRemote()
    remote.groups = [
        StoryGroupResponse.model_validate(
            {
                "pet": pet,
                "has_unviewed": True,
                "stories": [
                    {
                        "id": str(story_id),
                        "pet_id": pet["id"],
                        "user_id": pet["user_id"],
                        "media_url": "https://cdn.example/story.jpg",
                        "media_type": "image",
                        "created_at": NOW.isoformat(),
                        "expires_at": NOW.isoformat(),
                    }
                ],
            }
        )
    ]
    remote.fail.add("mark_story_viewed")
    errors: list[RemoteError] = []
    controller = StoriesController(remote, _session(), on_error=errors.append)

    async def scenario():
        await controller.load()
        return await controller.mark_viewed(story_id)

    assert asyncio.run(scenario()) is False
    assert controller.groups[0].stories[0].viewed is True
    assert controller.groups[0].has_unviewed is False
    assert len(errors) == 1


def test_follow_reload_during_write_keeps_optimistic_state():
    remote = StubRemote()
    controller = FollowController(remote, _session(), uuid4())

    async def scenario():
        await controller.load()
        remote.gate = asyncio.Event()
        task = asyncio.create_task(controller.follow())
        await asyncio.sleep(0)
        remote.followers = 12
        await controller.load()
        during = (controller.is_following, controller.followers_count)
        remote.gate.set()
        result = await task
        return during, result

    during, result = asyncio.run(scenario())

    assert during == (True, 11)
    assert result.phase is TogglePhase.CONFIRMED
    assert (controller.is_following, controller.followers_count) == (True, 11)


def test_follow_load_watermark_drops_older_realtime_counts():
    pet_id = uuid4()
    remote = StubRemote()
    remote.seq = 7
    controller = FollowController(remote, _session(), pet_id)
    asyncio.run(controller.load())

    stale = PetFollowEvent(pet_id=pet_id, followers_count=3, seq=6).model_dump(mode="json")
    fresh = PetFollowEvent(pet_id=pet_id, followers_count=11, seq=8).model_dump(mode="json")
    assert controller.handle_event(stale) is False
    assert controller.followers_count == 10
    assert controller.handle_event(fresh) is True
    assert controller.followers_count == 11


def test_remote_client_maps_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/follows/stats/"):
            return httpx.Response(404, json={"detail": "Pet not found"})
        raise httpx.ConnectError("connection refused", request=request)

    session = _session()

    async def scenario():
        async with RemoteClient(session, base_url="http://pawhub.test", transport=httpx.MockTransport(handler)) as remote:
            with pytest.raises(RemoteError) as not_found:
                await remote.follow_stats(uuid4())
            with pytest.raises(RemoteError) as offline:
                await remote.feed()
        return not_found.value, offline.value

    not_found, offline = asyncio.run(scenario())
    assert (not_found.status_code, not_found.detail) == (404, "Pet not found")
    assert offline.status_code is None


def test_realtime_hub_stamps_and_broadcasts_events():
    class FakeSocket:
        def __init__(self) -> None:
            self.sent: list[dict] = []

        async def accept(self) -> None:
            return None

        async def send_text(self, text: str) -> None:
            self.sent.append(json.loads(text))

    hub = RealtimeHub()
    socket = FakeSocket()
    pet_id = uuid4()

    async def scenario():
        await hub.connect(socket)
        first = hub.publish(PetFollowEvent(pet_id=pet_id, followers_count=1))
        second = hub.publish(PetFollowEvent(pet_id=pet_id, followers_count=2))
        for _ in range(5):
            await asyncio.sleep(0)
        await hub.disconnect(socket)
        return first, second

    first, second = asyncio.run(scenario())
    assert second.seq > first.seq
    assert [frame["followers_count"] for frame in socket.sent] == [1, 2]
    assert socket.sent[0]["type"] == "pet.follow"


# End-to-end through the real API ------------------------------------------


@pytest.fixture
def database() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(delete(table))
        session.commit()
    app.dependency_overrides.clear()


def _persist(*objects) -> None:
    with SessionLocal() as session:
        session.add_all(objects)
        session.commit()
        for obj in objects:
            session.refresh(obj)


def test_controllers_against_live_api(database):
    owner = User(username=f"owner-{uuid4().hex[:8]}", hashed_password="x")
    fan = User(username=f"fan-{uuid4().hex[:8]}", hashed_password="x")
    _persist(owner, fan)
    target = Pet(user_id=owner.id, name="Biscuit", species="Dog")
    _persist(target)
    post = Post(pet_id=target.id, user_id=owner.id, content="walkies", media_urls=[])
    _persist(post)

    app.dependency_overrides[get_current_user] = lambda: fan
    app.dependency_overrides[get_optional_user] = lambda: fan
    session = ClientSession(user_id=fan.id, access_token="token")

    async def scenario():
        transport = httpx.ASGITransport(app=app)
        async with RemoteClient(session, base_url="http://testserver", transport=transport) as remote:
            follow = FollowController(remote, session, target.id)
            await follow.load()
            followed = await follow.toggle()

            feed = FeedController(remote, session)
            await feed.load()
            liked = await feed.like(post.id)

            with SessionLocal() as db:
                db.execute(delete(Follow))
                db.execute(delete(Pet).where(Pet.id == target.id))
                db.commit()
            failed = await follow.toggle()
            return follow, feed, followed, liked, failed

    follow, feed, followed, liked, failed = asyncio.run(scenario())

    assert followed.phase is TogglePhase.CONFIRMED
    assert liked.phase is TogglePhase.CONFIRMED
    assert feed.posts[0].liked_by_user is True
    assert feed.posts[0].likes_count == 1
    with SessionLocal() as db:
        assert db.scalar(select(func.count()).select_from(Like)) == 1

    assert failed.phase is TogglePhase.ROLLED_BACK
    assert failed.error.status_code == 404
    assert (follow.is_following, follow.followers_count) == (True, 1)
