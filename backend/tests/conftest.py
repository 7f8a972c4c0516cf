import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from catalog_api.core.config import Settings
from catalog_api.db.session import create_schema
from catalog_api.main import create_app
from catalog_api.repositories.product_repository import SqlProductRepository


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads, with the product table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine):
    return SqlProductRepository(engine)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        db_host="db.invalid",
        db_port="5432",
        db_user="catalog",
        db_password="secret",
        db_name="catalog",
        db_probe_timeout=0,
        db_retry_interval=0,
    )


@pytest.fixture
def client(settings, repository):
    app = create_app(settings, repository=repository)
    with TestClient(app) as client:
        yield client
