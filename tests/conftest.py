import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from movies_api.db import ConnectionFactory, MovieRepository, get_connection_factory, init_models
from movies_api.main import app


@pytest.fixture
def engine():
    # One shared in-memory database for every connection the test opens
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_models(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def connections(engine):
    return ConnectionFactory(engine)


@pytest.fixture
def repository(connections):
    return MovieRepository(connections)


@pytest.fixture
def client(connections):
    app.dependency_overrides[get_connection_factory] = lambda: connections
    yield TestClient(app)
    app.dependency_overrides.clear()
