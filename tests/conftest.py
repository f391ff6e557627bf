from datetime import date
from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import transaction_dashboard.db.base  # noqa: E402, F401
from tests.utils.factories import create_transaction_factory  # noqa: E402
from transaction_dashboard.db.session import Base, get_db, get_session_factory  # noqa: E402
from transaction_dashboard.main import app  # noqa: E402
from transaction_dashboard.transactions.services.analytics import get_month_window  # noqa: E402


@pytest.fixture
def test_engine(tmp_path):
    """File-backed SQLite so concurrent branches get their own connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'transactions.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_session_local(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(test_session_local):
    session = test_session_local()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
async def test_app(test_session_local):
    def override_get_db():
        session = test_session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: test_session_local

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def january_transactions(db_session):
    """Three January 2021 sales (50 sold, 150 sold, 80 unsold) and one in February."""
    rows = [
        (1, "Mens Casual Shirt", 50, date(2021, 1, 5), "men's clothing", True),
        (2, "Solid Gold Bracelet", 150, date(2021, 1, 17), "jewelery", True),
        (3, "Rain Jacket", 80, date(2021, 1, 31), "men's clothing", False),
        (4, "Portable Hard Drive", 64, date(2021, 2, 1), "electronics", True),
    ]
    return [
        create_transaction_factory(
            db_session,
            id=transaction_id,
            title=title,
            description="Sample product",
            price=price,
            date_of_sale=date_of_sale,
            category=category,
            sold=sold,
        )
        for transaction_id, title, price, date_of_sale, category, sold in rows
    ]


@pytest.fixture
def january_2021():
    return get_month_window("January", 2021)
