"""Service test fixtures - call-counting collaborator fakes.

Invariants:
    - Every fake appends (method, args) to one shared call log
    - Factories never touch the network or a database unless a test asks for it

Design Decisions:
    - One shared log across fakes: "exactly one collaborator call" is len(log) == 1
"""

from types import SimpleNamespace

import pytest

from validator.core.domain_types import AccountId
from validator.services.command_dispatch import CommandHandler
from validator.services.session_bootstrap import SessionBootstrapper

from tests.helpers import ALICE


class FakePersistence:
    def __init__(self, database_url, validator_hotkey):
        self.database_url = database_url
        self.validator_hotkey = validator_hotkey
        self.closed = False
        self.close_error = None

    async def close(self):
        self.closed = True
        if self.close_error:
            raise self.close_error


@pytest.fixture
def calls():
    return []


@pytest.fixture
def fake_service(calls):
    class _FakeService:
        async def start(self, config_path, local_test):
            calls.append(("service.start", (config_path, local_test)))

        async def stop(self):
            calls.append(("service.stop", ()))

        async def status(self):
            calls.append(("service.status", ()))

        async def gen_config(self, output_path):
            calls.append(("service.gen_config", (output_path,)))

    return _FakeService()


@pytest.fixture
def fake_database(calls):
    class _FakeDatabase:
        async def handle(self, action):
            calls.append(("database.handle", (action,)))

    return _FakeDatabase()


@pytest.fixture
def fake_rental(calls):
    class _FakeRental:
        async def handle(self, action, hotkey, persistence):
            calls.append(("rental.handle", (action, hotkey, persistence)))

    return _FakeRental()


@pytest.fixture
def chain(calls):
    """Controllable chain client factory: set .address or .error."""
    state = SimpleNamespace(address=ALICE, error=None, params=None)

    async def factory(params):
        calls.append(("chain.connect", (params,)))
        state.params = params
        if state.error:
            raise state.error
        return SimpleNamespace(account_id=lambda: AccountId(state.address))

    state.factory = factory
    return state


@pytest.fixture
def persistence(calls):
    """Controllable persistence factory: set .error to fail open(), .close_error to fail close()."""
    state = SimpleNamespace(error=None, opened=[], engine_kwargs=[], close_error=None)

    async def factory(database_url, validator_hotkey, **engine_kwargs):
        calls.append(("persistence.open", (database_url, validator_hotkey)))
        state.engine_kwargs.append(engine_kwargs)
        if state.error:
            raise state.error
        handle = FakePersistence(database_url, validator_hotkey)
        handle.close_error = state.close_error
        state.opened.append(handle)
        return handle

    state.factory = factory
    return state


@pytest.fixture
def bootstrapper(chain, persistence):
    return SessionBootstrapper(chain.factory, persistence.factory)


@pytest.fixture
def handler(fake_service, fake_database, fake_rental, bootstrapper):
    return CommandHandler(
        service=fake_service,
        database=fake_database,
        rental=fake_rental,
        bootstrapper=bootstrapper,
    )
