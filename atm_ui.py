from atm_session import SessionController
from atm_states import SessionState


def atm_ui(bank, input_fn=input, output_fn=print):
    """Console front end for one session. Returns the session after the card is removed."""
    session = SessionController(
        bank,
        on_account_selected=lambda name, balance: output_fn(
            f'Selected account "{name}" with balance ${balance}'),
    )
    output_fn("=== Welcome to the ATM ===")

    # ---------------- Card ----------------
    while not session.has_card:
        raw = input_fn("Insert card (enter card number, blank to quit): ").strip()
        if not raw:
            return session
        if not raw.isdecimal():
            output_fn("Card number must be digits only.")
            continue
        result = session.insert_card(int(raw))
        if not result.ok:
            output_fn(f"ERROR: {result.error}")

    # ---------------- PIN Verification ----------------
    while session.state == SessionState.CARD_INSERTED:
        pin = input_fn("Enter PIN (blank to quit): ").strip()
        if not pin:
            return _eject(session, output_fn)
        result = session.enter_pin(pin)
        if result.ok:
            output_fn("PIN verified successfully.\n")
        else:
            output_fn(f"ERROR: {result.error}")

    # ---------------- Account ----------------
    if not _choose_account(session, input_fn, output_fn):
        return _eject(session, output_fn)

    # ---------------- Transaction Loop ----------------
    while True:
        output_fn("Select Transaction:")
        output_fn("1) Withdraw")
        output_fn("2) Deposit")
        output_fn("3) Check Balance")
        output_fn("4) Switch Account")
        output_fn("5) Exit")
        choice = input_fn("Choice: ").strip()

        if choice == "1":
            amount = _read_amount(input_fn, output_fn, "Enter withdrawal amount: ")
            if amount is not None:
                result = session.withdraw(amount)
                if result.ok:
                    output_fn(f"Withdrawal of ${amount} completed successfully.\n")
                else:
                    output_fn(f"ERROR: {result.error}")

        elif choice == "2":
            amount = _read_amount(input_fn, output_fn, "Enter deposit amount: ")
            if amount is not None:
                result = session.deposit(amount)
                if result.ok:
                    output_fn(f"Deposited ${amount}. New balance: ${result.value}\n")
                else:
                    output_fn(f"ERROR: {result.error}")

        elif choice == "3":
            output_fn(f"Your account balance is: ${session.see_balance().value}\n")

        elif choice == "4":
            _choose_account(session, input_fn, output_fn)

        elif choice == "5":
            output_fn("Thank you for using the ATM. Goodbye!")
            return _eject(session, output_fn)

        else:
            output_fn("Invalid choice. Try again.\n")


def _choose_account(session, input_fn, output_fn):
    names = session.account_names()
    while True:
        name = input_fn(f"Select account ({', '.join(names)}; blank to quit): ").strip()
        if not name:
            return session.account_selected
        result = session.select_account(name)
        if result.ok:
            return True
        output_fn(f"ERROR: {result.error}")


def _read_amount(input_fn, output_fn, prompt):
    raw = input_fn(prompt).strip()
    if not raw.isdecimal():
        output_fn("Amount must be a whole, non-negative number.")
        return None
    return int(raw)


def _eject(session, output_fn):
    session.remove_card()
    output_fn("Card removed.")
    return session


if __name__ == "__main__":
    from atm_config import configure_logging
    from sample_bank import sample_bank

    configure_logging()
    atm_ui(sample_bank())
