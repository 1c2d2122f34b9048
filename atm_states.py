from dataclasses import dataclass
from enum import Enum, auto


class SessionState(Enum):
    NO_CARD = auto()
    CARD_INSERTED = auto()
    AUTHENTICATED = auto()
    ACCOUNT_SELECTED = auto()


# One record per state, each holding only the data valid in that state.

@dataclass(frozen=True)
class NoCard:
    state = SessionState.NO_CARD


@dataclass(frozen=True)
class CardInserted:
    card_number: int
    state = SessionState.CARD_INSERTED


@dataclass(frozen=True)
class Authenticated:
    card_number: int
    directory: "AccountDirectory"
    state = SessionState.AUTHENTICATED


@dataclass(frozen=True)
class AccountSelected:
    card_number: int
    directory: "AccountDirectory"
    account_name: str
    state = SessionState.ACCOUNT_SELECTED
