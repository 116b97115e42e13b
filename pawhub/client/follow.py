"""Follow status controllers for pet profiles and the explore grid."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from ..schemas import ExplorePetResponse, PetFollowEvent
from .events import parse_event
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .toggle import ErrorCallback, OptimisticToggle, ToggleResult

logger = logging.getLogger(__name__)


class FollowController:
    """Follow state of one pet as seen by the session user."""

    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        pet_id: UUID,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.pet_id = pet_id
        self.following_count = 0
        self.loading = True
        self._toggle = OptimisticToggle(on_error=on_error, name=f"follow:{pet_id}")

    @property
    def toggle_state(self) -> OptimisticToggle:
        return self._toggle

    @property
    def is_following(self) -> bool:
        return bool(self._toggle.active)

    @property
    def followers_count(self) -> int:
        return self._toggle.count

    async def load(self) -> None:
        try:
            stats = await self.remote.follow_stats(self.pet_id)
        except RemoteError as exc:
            logger.warning("Could not load follow status for %s: %s", self.pet_id, exc)
            return
        finally:
            self.loading = False
        self.following_count = stats.following_count
        if self._toggle.pending:
            return
        is_following = stats.is_following if self.session.is_authenticated else False
        self._toggle.load(is_following, stats.followers_count, seq=stats.seq)

    async def follow(self, follower_pet_id: UUID | None = None) -> ToggleResult | None:
        if not self.session.is_authenticated or self._toggle.active is True:
            return None
        return await self._flip(follower_pet_id)

    async def unfollow(self) -> ToggleResult | None:
        if not self.session.is_authenticated or self._toggle.active is False:
            return None
        return await self._flip(None)

    async def toggle(self, follower_pet_id: UUID | None = None) -> ToggleResult | None:
        if not self.session.is_authenticated:
            return None
        return await self._flip(follower_pet_id)

    async def _flip(self, follower_pet_id: UUID | None) -> ToggleResult:
        acting_pet = follower_pet_id or self.session.active_pet_id

        async def write(should_follow: bool) -> None:
            if should_follow:
                await self.remote.follow(self.pet_id, follower_pet_id=acting_pet)
            else:
                await self.remote.unfollow(self.pet_id)

        return await self._toggle.toggle(write)

    def handle_event(self, payload: Any) -> bool:
        event = parse_event(payload)
        if not isinstance(event, PetFollowEvent) or event.pet_id != self.pet_id:
            return False
        return self._toggle.apply_remote(count=event.followers_count, seq=event.seq)


class ExploreFollowMap:
    """Batch-loaded explore results with one follow toggle per pet."""

    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.pets: list[ExplorePetResponse] = []
        self.loading = False
        self._on_error = on_error
        self._toggles: dict[UUID, OptimisticToggle] = {}

    async def load(
        self,
        *,
        query: str | None = None,
        species: str | None = None,
        location: str | None = None,
    ) -> list[ExplorePetResponse]:
        self.loading = True
        try:
            page = await self.remote.explore_page(query=query, species=species, location=location)
        except RemoteError as exc:
            logger.warning("Explore search failed: %s", exc)
            return self.pets
        finally:
            self.loading = False

        self.pets = page.items
        toggles: dict[UUID, OptimisticToggle] = {}
        for pet in self.pets:
            toggle = self._toggles.get(pet.id) or OptimisticToggle(on_error=self._on_error, name=f"follow:{pet.id}")
            if not toggle.pending:
                is_following = pet.is_following if self.session.is_authenticated else False
                toggle.load(is_following, pet.followers_count, seq=page.seq)
            toggles[pet.id] = toggle
        self._toggles = toggles
        return self.pets

    def follow_data(self, pet_id: UUID) -> tuple[bool, int]:
        toggle = self._toggles.get(pet_id)
        if toggle is None:
            return False, 0
        return bool(toggle.active), toggle.count

    async def toggle_follow(self, pet_id: UUID) -> ToggleResult | None:
        toggle = self._toggles.get(pet_id)
        if toggle is None or not self.session.is_authenticated:
            return None
        acting_pet = self.session.active_pet_id

        async def write(should_follow: bool) -> None:
            if should_follow:
                await self.remote.follow(pet_id, follower_pet_id=acting_pet)
            else:
                await self.remote.unfollow(pet_id)

        return await toggle.toggle(write)

    def handle_event(self, payload: Any) -> bool:
        event = parse_event(payload)
        if not isinstance(event, PetFollowEvent):
            return False
        toggle = self._toggles.get(event.pet_id)
        if toggle is None:
            return False
        return toggle.apply_remote(count=event.followers_count, seq=event.seq)


__all__ = ["ExploreFollowMap", "FollowController"]
