from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rpos.infrastructure.db import session as db_session
from rpos.infrastructure.db.models import order, table, user  # noqa: F401
from rpos.infrastructure.db.models.menu import Base, MenuItemModel
from rpos.infrastructure.db.models.table import TableModel
from rpos.infrastructure.db.models.user import UserModel
from rpos.infrastructure.messaging import redis_client


@pytest.fixture(scope="session", autouse=True)
def integration_environment(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    database_path = tmp_path_factory.mktemp("db") / "rpos.sqlite3"
    os.environ["DATABASE_URL"] = f"sqlite:///{database_path}"
    os.environ["APP_ENV"] = "test"
    os.environ["REPORT_TIMEZONE"] = "UTC"
    os.environ["RESTAURANT_NAME"] = "Test Bistro"
    os.environ.pop("REDIS_URL", None)
    os.environ.setdefault("OTEL_SERVICE_NAME", "rpos-backend-test")

    db_session._build_engine.cache_clear()
    redis_client._build_client.cache_clear()
    yield
    db_session._build_engine.cache_clear()


@pytest.fixture(autouse=True)
def fresh_schema() -> Iterator[None]:
    engine = db_session.get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    with engine.begin() as connection:
        connection.execute(
            MenuItemModel.__table__.insert(),
            [
                {
                    "id": "itm_burger",
                    "name": "Burger",
                    "category": "Mains",
                    "price": 0.0,
                    "description": None,
                    "sizes": [{"name": "Small", "price": 5.0}, {"name": "Large", "price": 8.0}],
                    "add_ons": [{"name": "Cheese", "price": 1.0}],
                },
                {
                    "id": "itm_fries",
                    "name": "Fries",
                    "category": "Sides",
                    "price": 3.5,
                    "description": "Skin-on",
                    "sizes": [],
                    "add_ons": [],
                },
            ],
        )
        connection.execute(
            TableModel.__table__.insert(),
            [
                {"id": "tbl_1", "table_number": 1, "capacity": 2, "status": "Available"},
                {"id": "tbl_2", "table_number": 2, "capacity": 4, "status": "Available"},
            ],
        )
        connection.execute(
            UserModel.__table__.insert(),
            [
                {"id": "usr_admin", "email": "owner@bistro.test", "role": "Admin"},
                {"id": "usr_staff", "email": "waiter@bistro.test", "role": "Staff"},
            ],
        )
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    from rpos.api.main import app

    with TestClient(app) as test_client:
        yield test_client
