from __future__ import annotations

import logging

from rpos.application.dto.requests import UserProfileRequest
from rpos.application.dto.responses import UserProfileResponse
from rpos.application.errors import UserNotFoundError
from rpos.application.mappers.user_mapper import to_user_profile_response
from rpos.application.ports.repositories import UserRepository
from rpos.application.use_cases.context import ANONYMOUS_SESSION, SessionContext
from rpos.domain.common.ids import UserId
from rpos.domain.user.entities import UserProfile, role_for_email

logger = logging.getLogger(__name__)


def load_session(user_repository: UserRepository, user_id: str | None) -> SessionContext:
    if not user_id:
        return ANONYMOUS_SESSION
    profile = user_repository.get(UserId(user_id))
    if profile is None:
        return SessionContext(user_id=UserId(user_id))
    return SessionContext(user_id=profile.user_id, role=profile.role)


class EnsureUserProfile:
    """Create the profile on first sign-in; later sign-ins keep the stored role."""

    def __init__(self, user_repository: UserRepository, admin_emails: frozenset[str]) -> None:
        self._user_repository = user_repository
        self._admin_emails = admin_emails

    def execute(self, user_id: UserId, request_dto: UserProfileRequest) -> UserProfileResponse:
        existing = self._user_repository.get(user_id)
        if existing is not None:
            return to_user_profile_response(existing)

        profile = UserProfile(
            user_id=user_id,
            email=request_dto.email,
            display_name=request_dto.display_name,
            role=role_for_email(request_dto.email, self._admin_emails),
        )
        self._user_repository.add(profile)
        logger.info(
            "user_profile_created",
            extra={"user_id": str(user_id), "role": profile.role.value},
        )
        return to_user_profile_response(profile)


class GetCurrentUser:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, session: SessionContext) -> UserProfileResponse:
        if session.user_id is None:
            raise UserNotFoundError("no user is signed in")
        profile = self._user_repository.get(session.user_id)
        if profile is None:
            raise UserNotFoundError(f"user {session.user_id} has no profile")
        return to_user_profile_response(profile)
