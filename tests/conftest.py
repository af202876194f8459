import os

# config validates the environment at import time
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret-key"

from types import SimpleNamespace

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from warehouse.core.db import Base, enable_sqlite_foreign_keys
from warehouse.models.catalog.category_models import Category
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.users.user_models import User


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        poolclass=NullPool,
    )
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


def _actor(user: User) -> SimpleNamespace:
    return SimpleNamespace(id=user.id, username=user.username, role=user.role, name=user.name)


@pytest.fixture
async def seed(session_factory):
    """Users, two items and two locations. Returns plain values only."""
    async with session_factory() as session:
        tools = Category(name="Tools")
        session.add(tools)
        await session.flush()

        users = {
            role: User(
                username=f"{role}1",
                password_hash="not-a-real-hash",
                name=f"{role.capitalize()} One",
                role=role,
            )
            for role in ("admin", "warehouse", "receiver", "user")
        }
        session.add_all(users.values())

        widget = Item(
            code="W-001",
            name="Widget",
            unit="pcs",
            min_stock=5,
            category_id=tools.id,
            category=tools.name,
        )
        cable = Item(code="C-002", name="Cable", unit="m", min_stock=0)
        shelf_a = Location(code="A-01", name="Shelf A1", area="North")
        room_z = Location(code="Z-09", name="Store room Z", area="South")
        session.add_all([widget, cable, shelf_a, room_z])

        await session.commit()

        return SimpleNamespace(
            admin=_actor(users["admin"]),
            keeper=_actor(users["warehouse"]),
            receiver=_actor(users["receiver"]),
            borrower=_actor(users["user"]),
            widget_id=widget.id,
            cable_id=cable.id,
            tools_id=tools.id,
            shelf_id=shelf_a.id,
            room_id=room_z.id,
        )
