from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from rpos.domain.table.entities import TableStatus
from rpos.infrastructure.db.models.menu import MenuItemModel
from rpos.infrastructure.db.models.table import TableModel
from rpos.infrastructure.db.session import get_engine

MENU_ITEMS = [
    {
        "id": "itm_001",
        "name": "Burger",
        "category": "Mains",
        "price": 0.0,
        "description": "Beef patty, cheddar, pickles",
        "sizes": [{"name": "Small", "price": 5.0}, {"name": "Large", "price": 8.0}],
        "add_ons": [{"name": "Cheese", "price": 1.0}, {"name": "Bacon", "price": 2.0}],
    },
    {
        "id": "itm_002",
        "name": "Margherita Pizza",
        "category": "Mains",
        "price": 14.5,
        "description": "Tomato, mozzarella, basil",
        "sizes": [],
        "add_ons": [{"name": "Olives", "price": 1.5}],
    },
    {
        "id": "itm_003",
        "name": "Caesar Salad",
        "category": "Starters",
        "price": 9.9,
        "description": "Romaine, croutons, parmesan",
        "sizes": [],
        "add_ons": [],
    },
    {
        "id": "itm_004",
        "name": "Latte",
        "category": "Drinks",
        "price": 3.5,
        "description": None,
        "sizes": [{"name": "Regular", "price": 3.5}, {"name": "Large", "price": 4.25}],
        "add_ons": [{"name": "Oat Milk", "price": 0.6}],
    },
]

TABLES = [
    {"id": f"tbl_{number:03d}", "table_number": number, "capacity": capacity}
    for number, capacity in ((1, 2), (2, 4), (3, 4), (4, 6))
]


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"menu_items", "tables", "orders", "users"}
    if not required_tables.issubset(set(inspector.get_table_names())):
        print("no schema yet")
        return

    with Session(engine) as session:
        for item in MENU_ITEMS:
            session.merge(MenuItemModel(**item))
        for table in TABLES:
            session.merge(TableModel(status=TableStatus.AVAILABLE.value, **table))
        session.commit()

    print(f"seeded {len(MENU_ITEMS)} menu items and {len(TABLES)} tables")


if __name__ == "__main__":
    main()
