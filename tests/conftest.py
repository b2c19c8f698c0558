"""Shared fixtures: an in-memory store and a router wired to it."""

import pytest

from hotelbot.engine import WaterfallEngine
from hotelbot.router import TurnRouter
from hotelbot.storage import MemoryStorage, StateStore


@pytest.fixture
def backend():
    return MemoryStorage()


@pytest.fixture
def store(backend):
    return StateStore(backend)


@pytest.fixture
def engine():
    return WaterfallEngine(reference_factory=lambda: "HB-TEST-1")


@pytest.fixture
def router(store, engine):
    return TurnRouter(store=store, engine=engine)
