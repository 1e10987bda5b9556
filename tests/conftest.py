import pytest

from shared.repositories.standby_queue import InMemoryQueueStore
from shared.services.standby_queue import StandbyQueueService

NOW = 1_700_000_000


@pytest.fixture
def store() -> InMemoryQueueStore:
    return InMemoryQueueStore()


@pytest.fixture
def service(store: InMemoryQueueStore) -> StandbyQueueService:
    return StandbyQueueService(store, clock=lambda: NOW)
