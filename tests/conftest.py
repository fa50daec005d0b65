"""Shared test fixtures for the dicemode test suite.

rolls  (function scope)
    A scripted random source. Push the values the next rolls should return
    with ``rolls.extend([...])``; it fails loudly if a value falls outside the
    requested range or the queue runs dry.

pipeline  (function scope)
    A Pipeline on the default processors wired to ``rolls``.

client  (function scope)
    An AsyncClient on the FastAPI app with get_pipeline overridden to return
    ``pipeline``, so route tests see deterministic reports.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dicemode.dependencies import get_pipeline
from dicemode.main import app
from dicemode.pipeline import Pipeline
from dicemode.processors import ProcessorRegistry


class ScriptedSource:
    """Random source returning queued values in order."""

    def __init__(self, values=()) -> None:
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def extend(self, values) -> ScriptedSource:
        self.values.extend(values)
        return self

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.values:
            raise AssertionError(f"Unexpected roll in [{a}, {b}]: no scripted values left")
        value = self.values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside [{a}, {b}]")
        return value


@pytest.fixture
def rolls() -> ScriptedSource:
    return ScriptedSource()


@pytest.fixture
def registry() -> ProcessorRegistry:
    return ProcessorRegistry()


@pytest.fixture
def pipeline(registry: ProcessorRegistry, rolls: ScriptedSource) -> Pipeline:
    return Pipeline(registry, rolls)


@pytest_asyncio.fixture
async def client(pipeline: Pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_pipeline, None)
