# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Dict
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the app
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["LOG_LEVEL"] = "WARNING"

from healthfit.database.adapters.sqlite_adapter import SQLiteAdapter  # noqa: E402
from healthfit.entities.catalogue import build_registry  # noqa: E402
from healthfit.entities.registry import EntityRegistry  # noqa: E402
from healthfit.main import create_app  # noqa: E402


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@asynccontextmanager
async def app_client(
    registry: EntityRegistry,
    database_path,
) -> AsyncIterator[AsyncClient]:
    """
    Serve `registry` from a fresh SQLite file.

    ASGITransport does not run the lifespan, so the adapter is connected
    and disconnected here.
    """
    adapter = SQLiteAdapter(f"sqlite+aiosqlite:///{database_path}")
    app = create_app(registry=registry, adapter=adapter)
    await adapter.connect()

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(
            transport=transport,
            base_url="http://test",
            timeout=30.0,
        ) as async_client:
            yield async_client
    finally:
        await adapter.disconnect()


@pytest_asyncio.fixture
async def client(tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the built-in catalogue."""
    async with app_client(build_registry(), tmp_path / "test_app.db") as c:
        yield c


@pytest.fixture
def make_client(tmp_path):
    """
    Factory for clients over a custom registry.

    Usage:
        async with make_client(registry) as client:
            ...
    """
    def factory(registry: EntityRegistry):
        return app_client(registry, tmp_path / f"{uuid4().hex[:8]}.db")
    return factory


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_payloads() -> Dict[str, dict]:
    """One valid create payload per built-in entity."""
    return {
        "users": {
            "name": "Ana Lima",
            "email": f"user_{uuid4().hex[:8]}@example.com",
            "role": "member",
            "status": "active",
        },
        "contents": {
            "title": "Stretching 101",
            "contentType": "article",
            "author": "Coach Sam",
            "status": "published",
        },
        "reports": {
            "reportName": "Weekly summary",
            "reportType": "activity",
            "dateRange": "2025-03-01..2025-03-07",
            "metrics": "calories,duration",
        },
        "feedbacks": {
            "userName": "Ana",
            "feedbackType": "app",
            "rating": 4,
            "comment": "Great tracking",
        },
        "products": {
            "productName": "Yoga Mat",
            "category": "equipment",
            "price": 29.99,
            "stock": 12,
            "description": "Non-slip mat",
        },
        "activities": {
            "activityType": "Morning Run",
            "duration": 30,
            "calories": 300,
            "date": "2025-03-01",
            "notes": "Felt strong",
        },
        "goals": {
            "goalName": "Run 5k",
            "goalType": "endurance",
            "targetValue": 5,
            "currentValue": 2,
            "deadline": "2025-06-30",
        },
        "workouts": {
            "workoutName": "Leg Day",
            "exercises": "squats, lunges",
            "duration": 45,
            "difficulty": "hard",
            "targetMuscles": "quads, glutes",
        },
        "trainers": {
            "trainerName": "Coach Sam",
            "specialization": "strength",
            "clientName": "Ana",
            "sessionType": "personal",
            "schedule": "Mon/Wed 7am",
        },
    }


@pytest.fixture
def sample_activity_data(sample_payloads: Dict[str, dict]) -> dict:
    return dict(sample_payloads["activities"])
