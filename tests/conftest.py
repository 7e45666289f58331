"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FRONTEND_URL"] = "https://shop.example"
os.environ["DEFAULT_WHATSAPP_NUMBER"] = "+91 98765 43210"

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from storefront.database import Base, get_db
from storefront.core.redis import RedisClient
from storefront.models.product import Product
from storefront.schemas.cart import CartLineItemBase
from storefront.services.cart_service import CartStore

ADMIN_KEY = "test-admin-key"

SEED_PRODUCTS = [
    {
        "id": "ring",
        "name": "Silver Ring",
        "price": 500,
        "stock_count": 10,
        "images": ["https://img.example/ring.jpg"],
    },
    {
        "id": "bangle",
        "name": "Glass Bangle",
        "price": 200,
        "stock_count": 5,
        "courier_charges": 50,
        "images": ["https://img.example/bangle.jpg"],
    },
    {
        "id": "anklet",
        "name": "Beaded Anklet",
        "price": 300,
        "sale_price": 250,
        "stock_count": 3,
        "images": ["https://img.example/anklet.jpg"],
        "sizes": ["S", {"name": "M", "image": "https://img.example/anklet-m.jpg"}],
    },
    {
        "id": "sold-out",
        "name": "Sold Out Earrings",
        "price": 900,
        "stock_count": 0,
        "in_stock": False,
    },
    {
        "id": "beads",
        "name": "Loose Beads",
        "price": 10,
        "stock_count": 150,
    },
]


def _engine_for(path):
    # NullPool keeps connections from being shared between event loops
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


async def _prepare(engine, seed: bool):
    import storefront.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if seed:
        maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with maker() as session:
            session.add_all([Product(**data) for data in SEED_PRODUCTS])
            await session.commit()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    """Session factory bound to a fresh SQLite database with seeded products"""
    engine = _engine_for(tmp_path / "test.db")
    await _prepare(engine, seed=True)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def fake_redis():
    return FakeAsyncRedis(decode_responses=True)


@pytest.fixture
def notifier():
    """Stand-in for the websocket connection manager"""
    mock = MagicMock()
    mock.notify_cart_updated = AsyncMock(return_value=0)
    mock.notify_order_created = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def cart_store(fake_redis, notifier):
    storage = RedisClient()
    storage.use(fake_redis)
    return CartStore(storage=storage, notifier=notifier)


@pytest.fixture
def make_item():
    """Factory for product snapshots as they are put into the cart"""
    def _make(product_id="ring", **overrides):
        data = {
            "product_id": product_id,
            "display_name": product_id.title(),
            "image_url": f"https://img.example/{product_id}.jpg",
            "unit_price": 500,
            "available_stock": 10,
        }
        data.update(overrides)
        return CartLineItemBase(**data)
    return _make


@pytest.fixture(scope="function")
def client(tmp_path):
    """Test client on a seeded SQLite database with an in-memory cart backend"""
    from storefront.main import app
    from storefront.api.deps import get_cart_store

    engine = _engine_for(tmp_path / "api.db")
    asyncio.run(_prepare(engine, seed=True))
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with maker() as session:
            yield session

    storage = RedisClient()
    storage.use(None)
    store = CartStore(storage=storage)

    @asynccontextmanager
    async def mock_lifespan(app):
        yield {}

    app.router.lifespan_context = mock_lifespan
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cart_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def cart_headers():
    return {"X-Cart-Session": "session-0001"}


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
