from datetime import datetime
from datetime import timezone

import pytest

from stuff_tracker.inventory.app import Inventory
from stuff_tracker.inventory.seed import seed


@pytest.fixture
def seed_time():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def inventory():
    return Inventory.in_memory()


@pytest.fixture
async def seeded(inventory, seed_time):
    await seed(
        inventory.locations, inventory.rooms, inventory.items, timestamp=seed_time
    )
    return inventory


@pytest.fixture
def context(seeded):
    return seeded.context()
