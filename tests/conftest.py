import os

# Must be set before fasttrack.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from fasttrack.database import Base, get_engine
from fasttrack.main import app
from tests.helpers import register


@pytest.fixture(autouse=True)
def reset_database():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def auth_headers(user):
    return user[1]
