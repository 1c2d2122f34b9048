import pytest

from atm_session import SessionController
from sample_bank import DEMO_CARD, DEMO_PIN, sample_bank


@pytest.fixture
def bank():
    return sample_bank()


@pytest.fixture
def session(bank):
    return SessionController(bank)


@pytest.fixture
def authenticated(session):
    session.insert_card(DEMO_CARD)
    session.enter_pin(DEMO_PIN)
    return session


@pytest.fixture
def selected(authenticated):
    authenticated.select_account("second")
    return authenticated
