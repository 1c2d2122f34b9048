from atm_states import SessionState
from atm_ui import atm_ui
from sample_bank import DEMO_CARD


def _run(bank, answers):
    answers = iter(answers)
    printed = []
    session = atm_ui(bank, input_fn=lambda prompt: next(answers), output_fn=printed.append)
    return session, printed


def test_withdraw_and_deposit_session(bank):
    session, printed = _run(bank, [
        str(DEMO_CARD),
        "0000",         # wrong PIN
        "1234",
        "nope",         # unknown account
        "second",
        "1", "200",     # withdraw too much
        "2", "50",      # deposit
        "1", "200",     # withdraw everything
        "3",
        "5",
    ])

    assert session.state == SessionState.NO_CARD
    assert bank.summary()[DEMO_CARD]["second"] == 0
    assert "ERROR: PIN entered is not correct" in printed
    assert 'Selected account "second" with balance $150' in printed
    assert any(line.startswith("ERROR: Insufficient funds") for line in printed)
    assert "Your account balance is: $0\n" in printed
    assert printed[-1] == "Card removed."


def test_unknown_card_then_quit(bank):
    session, printed = _run(bank, ["42", "abc", ""])
    assert session.state == SessionState.NO_CARD
    assert "ERROR: Card number does not exist in bank database" in printed
    assert "Card number must be digits only." in printed


def test_quit_at_pin_prompt_removes_card(bank):
    session, printed = _run(bank, [str(DEMO_CARD), ""])
    assert not session.has_card
    assert printed[-1] == "Card removed."


def test_switch_account_and_bad_amount(bank):
    session, printed = _run(bank, [
        str(DEMO_CARD), "1234", "main",
        "2", "-5",
        "4", "second",
        "3",
        "9",
        "5",
    ])
    assert "Amount must be a whole, non-negative number." in printed
    assert "Your account balance is: $150\n" in printed
    assert "Invalid choice. Try again.\n" in printed
    assert bank.summary()[DEMO_CARD] == {"main": 2000, "second": 150}


def test_superscript_digits_are_rejected(bank):
    session, printed = _run(bank, [
        "¹²",
        str(DEMO_CARD), "1234", "main",
        "1", "²",
        "2", "³",
        "5",
    ])
    assert "Card number must be digits only." in printed
    assert printed.count("Amount must be a whole, non-negative number.") == 2
    assert bank.summary()[DEMO_CARD]["main"] == 2000
    assert not session.has_card
