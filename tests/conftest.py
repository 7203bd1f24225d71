import random
from datetime import datetime

import pytest

from lifeflow.ai import LifeFlowAI
from lifeflow.app import LifeFlowApp
from lifeflow.database import LifeFlowDatabase
from lifeflow.network import LifeFlowNetwork
from lifeflow.storage import MemoryStorage


FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0)


def fixed_clock():
    return FIXED_NOW


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def database(storage, rng):
    return LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)


@pytest.fixture
def ai(database, rng):
    return LifeFlowAI(database, rng=rng, clock=fixed_clock)


@pytest.fixture
def network():
    return LifeFlowNetwork(check_url="http://lifeflow.invalid", timeout=0.1, sync_delay=0)


@pytest.fixture
def lifeflow_app(database, ai, network, rng):
    return LifeFlowApp(database=database, ai=ai, network=network, rng=rng, clock=fixed_clock)
