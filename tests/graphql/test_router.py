"""Tests for the HTTP surface: GraphQL endpoint, metrics and problem details."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from processed_data.app.main import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from tests.conftest import FakeStorage

QUERY = "{ dataCollection(id: 1) { id processingJobs { id } processedData { downloadUrl } } }"


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    storage: FakeStorage,
) -> FastAPI:
    """Application with state normally set up by the lifespan."""
    application = create_app()
    application.state.session_factory = session_factory
    application.state.storage = storage
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
@pytest.mark.usefixtures("seeded")
async def test_post_executes_query(client: AsyncClient) -> None:
    """Test that POST / executes a GraphQL operation."""
    response = await client.post("/", json={"query": QUERY})

    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    assert body["data"]["dataCollection"]["id"] == 1
    assert body["data"]["dataCollection"]["processingJobs"] == [{"id": 100}, {"id": 101}]
    assert len(body["data"]["dataCollection"]["processedData"]) == 2


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """Test that the caller's request id is returned on the response."""
    response = await client.post(
        "/",
        json={"query": "{ dataCollection(id: 3) { id } }"},
        headers={"x-request-id": "gateway-123"},
    )

    assert response.status_code == 200
    assert response.headers["x-request-id"] == "gateway-123"


@pytest.mark.asyncio
async def test_request_id_is_generated(client: AsyncClient) -> None:
    """Test that a request id is generated when the caller sends none."""
    response = await client.post("/", json={"query": "{ dataCollection(id: 3) { id } }"})

    assert response.status_code == 200
    assert len(response.headers["x-request-id"]) == 32


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient) -> None:
    """Test that loader and request metrics are exposed after a query."""
    await client.post("/", json={"query": "{ dataCollection(id: 3) { processingJobs { id } } }"})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "graphql_requests_total" in response.text
    assert "graphql_dataloader_batches_total" in response.text


@pytest.mark.asyncio
async def test_missing_database_returns_problem_details(app: FastAPI) -> None:
    """Test that requests before the database is ready get a 503 problem."""
    app.state.session_factory = None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/", json={"query": QUERY})

    assert response.status_code == 503
    assert response.headers["content-type"].startswith("application/problem+json")
    problem = response.json()
    assert problem["status"] == 503
    assert problem["detail"] == "Database is not initialized"
    assert problem["instance"] == "/"
