from __future__ import annotations

from rpos.application.dto.responses import UserProfileResponse
from rpos.domain.user.entities import UserProfile


def to_user_profile_response(profile: UserProfile) -> UserProfileResponse:
    return UserProfileResponse(
        userId=str(profile.user_id),
        email=profile.email,
        displayName=profile.display_name,
        role=profile.role.value,
        isAdmin=profile.is_admin,
    )
