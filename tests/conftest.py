import pytest

from rental_registry.clock import ManualClock
from rental_registry.core.config import Settings
from rental_registry.db.base import create_db_engine
from rental_registry.ledger import InMemoryLedger
from rental_registry.registry import Registry

DAY = 86400
T0 = 1_700_000_000

ADMIN = "admin"
OWNER = "owner_1"
TENANT = "tenant_1"


@pytest.fixture(scope="function")
def settings() -> Settings:
    """Settings isolated from any .env file or environment."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        admin_identity=ADMIN,
        seconds_per_day=DAY,
    )


@pytest.fixture(scope="function")
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture(scope="function")
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture(scope="function")
def registry(settings: Settings, clock: ManualClock, ledger: InMemoryLedger):
    """Create a registry on a fresh in-memory database for each test."""
    engine = create_db_engine(settings.database_url)
    reg = Registry(
        admin=ADMIN,
        ledger=ledger,
        clock=clock,
        engine=engine,
        settings=settings,
    )
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture(scope="function")
def events(registry: Registry) -> list:
    """Collect every event the registry publishes."""
    collected: list = []
    registry.subscribe(collected.append)
    return collected


@pytest.fixture(scope="function")
def property_id(registry: Registry) -> int:
    """Register a property priced at 100 per day with a 500 deposit."""
    return registry.register_property(
        OWNER, "Sea view loft", "Two rooms", "Harbour St 1", 100, 500
    )


@pytest.fixture(scope="function")
def agreement_id(registry: Registry, property_id: int) -> int:
    """Rent the property for three days starting tomorrow (total 800)."""
    return registry.create_rental_agreement(
        TENANT, property_id, T0 + DAY, T0 + 4 * DAY, 800
    )
