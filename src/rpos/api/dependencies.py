from __future__ import annotations

from fastapi import Header

from rpos.application.use_cases.context import SessionContext
from rpos.application.use_cases.user_profile import load_session
from rpos.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository

USER_ID_HEADER = "X-User-Id"


def current_session(
    user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> SessionContext:
    """Resolve the caller's role; unknown or missing users act as Staff."""
    return load_session(SqlAlchemyUserRepository(), user_id)
