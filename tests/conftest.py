import asyncio

import pytest

import unitlogic


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_default_engine():
    unitlogic.reset()
    yield
    unitlogic.reset()


@pytest.fixture
def engine() -> unitlogic.LogicEngine:
    return unitlogic.LogicEngine()


@pytest.fixture
def log() -> list[str]:
    return []


@pytest.fixture
def delayed_lookup(log):
    """Provides every numeric name with a producer resolving after that many milliseconds."""

    def lookup(name, params, options):
        if not name.isdigit():
            return None

        async def produce(name, params, options):
            log.append(f"start{name}")
            await asyncio.sleep(int(name) / 1000)
            log.append(f"log{name}")
            return f"res{name}"

        return produce

    return lookup
