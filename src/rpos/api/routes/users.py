from __future__ import annotations

from fastapi import APIRouter, Depends, Header

from rpos.api.dependencies import USER_ID_HEADER, current_session
from rpos.application.dto.requests import UserProfileRequest
from rpos.application.dto.responses import UserProfileResponse
from rpos.application.use_cases.context import SessionContext
from rpos.application.use_cases.user_profile import EnsureUserProfile, GetCurrentUser
from rpos.domain.common.ids import UserId
from rpos.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from rpos.infrastructure.settings import admin_emails

router = APIRouter()


@router.post("/v1/users/profile", response_model=UserProfileResponse)
def ensure_profile(
    request_dto: UserProfileRequest,
    user_id: str = Header(alias=USER_ID_HEADER),
) -> UserProfileResponse:
    use_case = EnsureUserProfile(
        user_repository=SqlAlchemyUserRepository(),
        admin_emails=admin_emails(),
    )
    return use_case.execute(user_id=UserId(user_id), request_dto=request_dto)


@router.get("/v1/users/me", response_model=UserProfileResponse)
def current_user(session: SessionContext = Depends(current_session)) -> UserProfileResponse:
    return GetCurrentUser(user_repository=SqlAlchemyUserRepository()).execute(session)
