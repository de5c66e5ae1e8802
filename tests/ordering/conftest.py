import pytest
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def store():
    from ordering.store import set_store
    from ordering.store.memory_adapter import MemoryOrderingStore

    store = MemoryOrderingStore()
    set_store(store)
    return store


@pytest.fixture()
def gateway():
    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def catalogue(store):
    """Two catalogue items: A at 500 and B at 1500 (minor units)."""
    return {
        "A": store.add_item(name="Item A", price=500, description="First item", image_url="https://img/a.jpg"),
        "B": store.add_item(name="Item B", price=1500, description="Second item", image_url="https://img/b.jpg"),
    }


@pytest.fixture()
def user_id():
    return "user-001"
