"""Shared test fixtures."""

import pytest

from engine import DistributionEngine
from models import Connection

SEED = ("Friends", "Family", "Work")


@pytest.fixture
def engine() -> DistributionEngine:
    return DistributionEngine(seed_groups=SEED)


async def connect(engine: DistributionEngine, client_id: str) -> Connection:
    """Attach a connection with no websocket; events stay in its queue."""
    conn = Connection(client_id)
    await engine.attach(conn)
    return conn


async def joined(engine: DistributionEngine, client_id: str, name: str | None = None) -> Connection:
    conn = await connect(engine, client_id)
    await engine.join(client_id, name or client_id)
    return conn


def types(events: list[dict]) -> list[str]:
    return [event["type"] for event in events]


def of_type(events: list[dict], typ: str) -> list[dict]:
    return [event for event in events if event["type"] == typ]
