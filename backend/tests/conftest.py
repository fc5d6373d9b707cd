from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional

import pytest

pytest.importorskip("pydantic_settings")

from app.services.chat.config import ChatConfig


class FakeContentStore:
    """In-memory store: known tables answer, anything else fails like a missing relation."""

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None, broken: Iterable[str] = ()):
        self.tables = dict(tables or {})
        self.broken = set(broken)
        self.calls: List[str] = []

    async def select(self, table: str, limit: int) -> List[Dict[str, Any]]:
        self.calls.append(table)
        await asyncio.sleep(0)
        if table in self.broken:
            raise RuntimeError(f"permission denied for table {table}")
        if table not in self.tables:
            raise RuntimeError(f'relation "public.{table}" does not exist')
        return list(self.tables[table])[:limit]


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(
        owner_name="Ada",
        api_key="test-key",
        model="gemini-1.5-flash-latest",
        api_base="https://gemini.test/v1",
        rate_limit_backoff_seconds=1.5,
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def portfolio_tables() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "projects": [
            {"id": 1, "title": "Beta", "year": 2023, "description": "Data pipeline", "sort_order": 2},
            {"id": 2, "title": "Gamma", "published": False, "sort_order": 0},
            {"id": 3, "title": "Alpha", "year": 2022, "description": "Portfolio site", "sort_order": 1},
        ],
        "work_experience": [
            {"role": "Engineer", "company": "Acme", "start": "2021", "published": True},
        ],
        "certs": [
            {"name": "AWS Solutions Architect", "issuer": "Amazon", "issued_on": "2023-05"},
        ],
        "skills": [
            {"name": "Python", "group_name": "Languages", "sort_order": 1},
            {"name": "SQL", "group_name": "Data", "sort_order": 2},
        ],
    }


@pytest.fixture
def make_store():
    return FakeContentStore
