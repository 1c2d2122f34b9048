import logging
import uuid
from threading import Lock

from atm_errors import (
    ATMError,
    CardAlreadyInserted,
    InvalidAmount,
    NoAccountSelected,
    NoCardInserted,
    NoSuchAccount,
    NoSuchCard,
    PinRequired,
    Result,
    check_amount,
)
from atm_states import AccountSelected, Authenticated, CardInserted, NoCard, SessionState
from bank import BankRegistry
from pin_security import mask_card

logger = logging.getLogger(__name__)


class SessionController:
    """One ATM session against a BankRegistry.

    The session moves NO_CARD -> CARD_INSERTED -> AUTHENTICATED ->
    ACCOUNT_SELECTED. Every operation checks its own precondition and
    returns a Result; nothing here raises for a caller mistake.
    """

    def __init__(self, bank: BankRegistry, on_account_selected=None):
        if not isinstance(bank, BankRegistry):
            raise TypeError("SessionController needs a BankRegistry")
        self.bank = bank
        self.on_account_selected = on_account_selected
        self._current = NoCard()

    # ---------------- STATE ----------------

    @property
    def state(self) -> SessionState:
        return self._current.state

    @property
    def card_number(self):
        return getattr(self._current, "card_number", None)

    @property
    def selected_account(self):
        return getattr(self._current, "account_name", None)

    @property
    def has_card(self) -> bool:
        return self.state != SessionState.NO_CARD

    @property
    def pin_valid(self) -> bool:
        return self.state in (SessionState.AUTHENTICATED, SessionState.ACCOUNT_SELECTED)

    @property
    def account_selected(self) -> bool:
        return self.state == SessionState.ACCOUNT_SELECTED

    def account_names(self):
        """Names of the card's accounts, empty until the PIN is verified."""
        if not self.pin_valid:
            return []
        return self._current.directory.account_names()

    def _reject(self, error: ATMError) -> Result:
        logger.warning("%s rejected in state %s: %s", error.kind.name, self.state.name, error)
        return Result.failure(error)

    # ---------------- CARD ----------------

    def insert_card(self, card_number) -> Result:
        if self.has_card:
            return self._reject(CardAlreadyInserted())
        if not self.bank.card_exists(card_number):
            return self._reject(NoSuchCard())
        self._current = CardInserted(card_number)
        logger.info("Card %s inserted", mask_card(card_number))
        return Result.success(card_number)

    def remove_card(self) -> Result:
        card_number = self.card_number
        if card_number is not None:
            logger.info("Card %s removed", mask_card(card_number))
        self._current = NoCard()
        return Result.success(card_number)

    # ---------------- PIN ----------------

    def enter_pin(self, pin) -> Result:
        if not self.has_card:
            return self._reject(NoCardInserted())

        result = self.bank.check_pin(self.card_number, pin)
        if not result.ok:
            # A failed re-check also drops authentication and the selected account
            self._current = CardInserted(self.card_number)
            return self._reject(result.error)

        if self.state == SessionState.CARD_INSERTED:
            self._current = Authenticated(self.card_number, result.value)
            logger.info("PIN verified for card %s", mask_card(self.card_number))
        return Result.success()

    # ---------------- ACCOUNT ----------------

    def select_account(self, name) -> Result:
        if not self.pin_valid:
            return self._reject(PinRequired())

        directory = self._current.directory
        try:
            balance = directory.balance(name)
        except NoSuchAccount as e:
            return self._reject(e)

        self._current = AccountSelected(self.card_number, directory, name)
        logger.info("Selected account %r with balance %d", name, balance)
        if self.on_account_selected is not None:
            self.on_account_selected(name, balance)
        return Result.success(balance)

    # ---------------- TRANSACTIONS ----------------

    def see_balance(self) -> Result:
        if not self.account_selected:
            return self._reject(NoAccountSelected())
        return self._transact(lambda directory, name: directory.balance(name))

    def withdraw(self, amount) -> Result:
        if not self.account_selected:
            return self._reject(NoAccountSelected())
        try:
            check_amount(amount)
        except InvalidAmount as e:
            return self._reject(e)
        result = self._transact(lambda directory, name: directory.withdraw(name, amount))
        if result.ok:
            logger.info("Withdrew %d from %r", amount, self.selected_account)
        return result

    def deposit(self, amount) -> Result:
        if not self.account_selected:
            return self._reject(NoAccountSelected())
        try:
            check_amount(amount)
        except InvalidAmount as e:
            return self._reject(e)
        result = self._transact(lambda directory, name: directory.deposit(name, amount))
        if result.ok:
            logger.info("Deposited %d into %r", amount, self.selected_account)
        return result

    def _transact(self, operation) -> Result:
        current = self._current
        try:
            return Result.success(operation(current.directory, current.account_name))
        except ATMError as e:
            return self._reject(e)

    def __repr__(self):
        return f"SessionController(state={self.state.name})"


# ---------------- SESSION STORE ----------------

class UnknownSession(KeyError):
    pass


class TooManySessions(RuntimeError):
    pass


class SessionStore:
    """Live sessions for one bank, keyed by an opaque id (in-memory only).

    Each web app owns its own store, so an id is only ever resolved against
    the bank it was opened on.
    """

    def __init__(self, bank: BankRegistry, max_sessions: int = None):
        if not isinstance(bank, BankRegistry):
            raise TypeError("SessionStore needs a BankRegistry")
        self.bank = bank
        self.max_sessions = max_sessions
        self._sessions = {}
        self._lock = Lock()

    def open(self) -> str:
        session = SessionController(self.bank)
        session_id = uuid.uuid4().hex
        with self._lock:
            if self.max_sessions is not None and len(self._sessions) >= self.max_sessions:
                raise TooManySessions(f"Session limit of {self.max_sessions} reached")
            self._sessions[session_id] = session
        logger.info("Opened session %s", session_id)
        return session_id

    def get(self, session_id: str) -> SessionController:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSession(session_id)
        return session

    def close(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.remove_card()
        logger.info("Closed session %s", session_id)
        return True

    def __len__(self):
        with self._lock:
            return len(self._sessions)
