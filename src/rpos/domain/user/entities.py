from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rpos.domain.common.ids import UserId


class UserRole(str, Enum):
    ADMIN = "Admin"
    STAFF = "Staff"


@dataclass(frozen=True)
class UserProfile:
    user_id: UserId
    email: str | None
    display_name: str | None
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def role_for_email(email: str | None, admin_emails: frozenset[str]) -> UserRole:
    if email and email.strip().lower() in admin_emails:
        return UserRole.ADMIN
    return UserRole.STAFF
