from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from rpos.application.ports.repositories import UserRepository
from rpos.domain.common.ids import UserId
from rpos.domain.user.entities import UserProfile, UserRole
from rpos.infrastructure.db.models.user import UserModel
from rpos.infrastructure.db.session import get_engine, persistence_errors


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> UserProfile | None:
        with persistence_errors("user_get"), Session(self._engine) as session:
            model = session.get(UserModel, str(user_id))
        if model is None:
            return None
        return UserProfile(
            user_id=UserId(model.id),
            email=model.email,
            display_name=model.display_name,
            role=UserRole(model.role),
        )

    def add(self, profile: UserProfile) -> None:
        model = UserModel(
            id=str(profile.user_id),
            email=profile.email,
            display_name=profile.display_name,
            role=profile.role.value,
        )
        with persistence_errors("user_add"), Session(self._engine) as session:
            session.add(model)
            session.commit()
