"""Signed-in identity passed explicitly to every client controller."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(slots=True)
class ClientSession:
    """Who is acting, as which pet, and with which role.

    An anonymous session (no ``user_id``) can read but every mutating
    controller call becomes a no-op.
    """

    user_id: UUID | None = None
    access_token: str | None = None
    active_pet_id: UUID | None = None
    role: str = "user"

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and bool(self.access_token)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_doctor(self) -> bool:
        return self.role == "doctor"

    @property
    def is_clinic_owner(self) -> bool:
        return self.role == "clinic_owner"

    def auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}


__all__ = ["ClientSession"]
