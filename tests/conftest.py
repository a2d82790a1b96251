"""Shared test fixtures.

HTTP tests never reach PostgreSQL: the session dependency yields a mock
session and each test swaps router services for ones wired to fakes.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.econ_common.database import get_db_session
from src.main import app
from tests.fake_repositories import make_session


async def _mock_db_session():
    yield make_session()


@pytest.fixture
async def client() -> AsyncClient:
    """Async client against the economy API with the database stubbed out."""
    app.dependency_overrides[get_db_session] = _mock_db_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db_session, None)
