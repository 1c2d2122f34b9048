import logging
from threading import Lock
from typing import Dict, Mapping

from atm_errors import (
    InsufficientFunds,
    InvalidAmount,
    NoSuchAccount,
    NoSuchCard,
    Result,
    WrongPin,
    check_amount,
)
from pin_security import mask_card, pin_matches

logger = logging.getLogger(__name__)


def is_card_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class AccountDirectory:
    """The PIN and named account balances behind one card.

    Balances are read and changed by account name; the lock makes each
    check-and-update atomic when two sessions share a card.
    """

    def __init__(self, pin: str, accounts: Mapping[str, int]):
        if not isinstance(pin, str):
            raise TypeError(f"PIN must be a string, got {type(pin).__name__}")
        self.pin = pin
        self._accounts: Dict[str, int] = {}
        for name, balance in accounts.items():
            check_amount(balance)
            self._accounts[name] = balance
        self._lock = Lock()

    def account_names(self):
        with self._lock:
            return sorted(self._accounts)

    def has_account(self, name: str) -> bool:
        if not isinstance(name, str):
            return False
        with self._lock:
            return name in self._accounts

    def pin_matches(self, pin: str) -> bool:
        return pin_matches(self.pin, pin)

    def balance(self, name: str) -> int:
        with self._lock:
            self._require(name)
            return self._accounts[name]

    def withdraw(self, name: str, amount: int) -> int:
        check_amount(amount)
        with self._lock:
            self._require(name)
            balance = self._accounts[name]
            if balance < amount:
                raise InsufficientFunds(
                    f"Insufficient funds: balance {balance}, requested {amount}"
                )
            self._accounts[name] = balance - amount
            return amount

    def deposit(self, name: str, amount: int) -> int:
        check_amount(amount)
        with self._lock:
            self._require(name)
            self._accounts[name] += amount
            return self._accounts[name]

    def _require(self, name):
        # caller holds the lock
        if not isinstance(name, str) or name not in self._accounts:
            raise NoSuchAccount(f"Account does not exist: {name!r}")

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._accounts)

    def __repr__(self):
        return f"AccountDirectory(accounts={self.account_names()})"


class BankRegistry:
    """Card number -> AccountDirectory lookup and PIN check."""

    def __init__(self, cards: Mapping[int, AccountDirectory]):
        # The card set is fixed here; directories are shared, not copied
        self._cards: Dict[int, AccountDirectory] = dict(cards)

    @classmethod
    def from_dict(cls, data):
        """Build a registry from {card: {"pin": str, "accounts": {name: int}}}."""
        cards = {}
        for card_number, info in data.items():
            cards[int(card_number)] = AccountDirectory(info["pin"], info.get("accounts", {}))
        return cls(cards)

    def card_exists(self, card_number) -> bool:
        if not is_card_number(card_number):
            return False
        return card_number in self._cards

    def check_pin(self, card_number, pin) -> Result:
        directory = self._cards.get(card_number) if is_card_number(card_number) else None
        if directory is None:
            logger.warning("PIN check for unknown card %s", mask_card(card_number))
            return Result.failure(NoSuchCard())
        if not directory.pin_matches(pin):
            logger.warning("Wrong PIN for card %s", mask_card(card_number))
            return Result.failure(WrongPin())
        return Result.success(directory)

    def items(self):
        return self._cards.items()

    def summary(self):
        return {card_number: directory.snapshot() for card_number, directory in self._cards.items()}

    def __len__(self):
        return len(self._cards)

    def __contains__(self, card_number):
        return self.card_exists(card_number)
