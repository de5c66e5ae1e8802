from datetime import UTC, datetime

import pytest
from notifications.channel import set_email_adapter
from notifications.channel.fake_email import FakeEmailAdapter
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def identity_bed():
    from identity.domain import identity

    bed = DomainFixture(identity)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(identity_bed):
    with identity_bed.domain_context():
        yield


@pytest.fixture()
def user_store():
    from identity.store import set_user_store
    from identity.store.memory_adapter import MemoryUserStore

    store = MemoryUserStore()
    set_user_store(store)
    return store


@pytest.fixture()
def mailer():
    adapter = FakeEmailAdapter()
    set_email_adapter(adapter)
    return adapter


@pytest.fixture()
def user(user_store):
    return user_store.add_user(email="wes@example.com", password_hash="old-hash")


@pytest.fixture()
def issued_at():
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
