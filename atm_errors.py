"""
Error kinds raised by the bank layer and returned by the session controller.

The bank raises these as exceptions; SessionController catches them at its
boundary and hands them back inside a Result, so callers never need a
try/except around a session call.
"""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NO_SUCH_CARD = "NO_SUCH_CARD"
    WRONG_PIN = "WRONG_PIN"
    PIN_REQUIRED = "PIN_REQUIRED"
    NO_SUCH_ACCOUNT = "NO_SUCH_ACCOUNT"
    NO_ACCOUNT_SELECTED = "NO_ACCOUNT_SELECTED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    CARD_ALREADY_INSERTED = "CARD_ALREADY_INSERTED"
    NO_CARD_INSERTED = "NO_CARD_INSERTED"


class ATMError(Exception):
    kind: Optional[ErrorKind] = None
    default_message = "ATM operation failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)


class NoSuchCard(ATMError):
    kind = ErrorKind.NO_SUCH_CARD
    default_message = "Card number does not exist in bank database"


class WrongPin(ATMError):
    kind = ErrorKind.WRONG_PIN
    default_message = "PIN entered is not correct"


class PinRequired(ATMError):
    kind = ErrorKind.PIN_REQUIRED
    default_message = "Must enter PIN before accessing the accounts"


class NoSuchAccount(ATMError):
    kind = ErrorKind.NO_SUCH_ACCOUNT
    default_message = "Account does not exist"


class NoAccountSelected(ATMError):
    kind = ErrorKind.NO_ACCOUNT_SELECTED
    default_message = "No account has been selected"


class InsufficientFunds(ATMError):
    """Withdrawal larger than the balance; the balance is left untouched."""
    kind = ErrorKind.INSUFFICIENT_FUNDS
    default_message = "Insufficient funds, enter amount smaller than current balance"


class InvalidAmount(ATMError):
    """Negative or non-integer amount."""
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Amount must be a non-negative whole number"


class CardAlreadyInserted(ATMError):
    kind = ErrorKind.CARD_ALREADY_INSERTED
    default_message = "A card is already inserted, remove it first"


class NoCardInserted(ATMError):
    kind = ErrorKind.NO_CARD_INSERTED
    default_message = "Insert a card first"


class Result:
    """Outcome of a session operation: a value or an ATMError, never both."""

    __slots__ = ("value", "error")

    def __init__(self, value=None, error: ATMError = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error: ATMError):
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self):
        return self.error.kind if self.error is not None else None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error.kind.name}: {self.error})"


def check_amount(amount):
    """Return amount unchanged if it is a non-negative int, else raise InvalidAmount."""
    # bool is an int subclass; True is not an amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be a whole number, got {amount!r}")
    if amount < 0:
        raise InvalidAmount(f"Amount must not be negative, got {amount}")
    return amount
