import logging

from atm_session import SessionController
from bank import AccountDirectory, BankRegistry

logger = logging.getLogger(__name__)

DEMO_CARD = 123123123
DEMO_PIN = "1234"


def sample_bank() -> BankRegistry:
    """A fresh two-customer bank used by the demo, the web app and the console."""
    return BankRegistry({
        DEMO_CARD: AccountDirectory(DEMO_PIN, {"main": 2000, "second": 150}),
        123456789: AccountDirectory("9999", {"main": 10000}),
    })


def run_demo(bank: BankRegistry = None) -> int:
    """Walk the second account of the demo card through a short scripted session.

    Returns the final balance of that account.
    """
    if bank is None:
        bank = sample_bank()
    controller = SessionController(bank)

    controller.insert_card(DEMO_CARD)
    controller.enter_pin("0000")  # wrong, stays CARD_INSERTED
    controller.enter_pin(DEMO_PIN)

    controller.select_account("wrong_name")
    controller.select_account("second")
    logger.info("current balance: %s", controller.see_balance().value)

    refused = controller.withdraw(200)  # more than the balance
    logger.info("withdraw 200: %r", refused)

    controller.deposit(50)
    controller.withdraw(200)
    balance = controller.see_balance().value
    logger.info("new balance: %s", balance)

    controller.remove_card()
    return balance


if __name__ == "__main__":
    from atm_config import configure_logging

    configure_logging()
    run_demo()
