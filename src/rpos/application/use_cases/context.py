from __future__ import annotations

from dataclasses import dataclass

from rpos.application.errors import PermissionDeniedError
from rpos.domain.common.ids import UserId
from rpos.domain.user.entities import UserRole


@dataclass(frozen=True)
class TraceContext:
    trace_id: str | None
    request_id: str | None


@dataclass(frozen=True)
class SessionContext:
    """Identity of the terminal user, passed explicitly to role-gated actions."""

    user_id: UserId | None
    role: UserRole = UserRole.STAFF

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def require_admin(self, action: str) -> None:
        if not self.is_admin:
            raise PermissionDeniedError(
                f"{action} requires the Admin role",
                details={"role": self.role.value},
            )


ANONYMOUS_SESSION = SessionContext(user_id=None, role=UserRole.STAFF)
