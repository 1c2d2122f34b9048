import hmac
import logging

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

HASH_PREFIXES = ("scrypt:", "pbkdf2:")


def is_hashed(stored_pin: str) -> bool:
    return stored_pin.startswith(HASH_PREFIXES)


def pin_matches(stored_pin: str, pin) -> bool:
    if not isinstance(pin, str):
        return False
    # Hashed PINs go through werkzeug, plain ones fall back to a direct compare
    if is_hashed(stored_pin):
        return check_password_hash(stored_pin, pin)
    return hmac.compare_digest(stored_pin.encode("utf-8"), pin.encode("utf-8"))


def hash_pin(pin: str) -> str:
    return generate_password_hash(pin)


def hash_pins(registry) -> int:
    """Replace every plain-text PIN in the registry with a werkzeug hash.

    Returns the number of cards that were rehashed. Cards whose PIN is
    already hashed are left alone, so running this twice is harmless.
    """
    updated_count = 0
    for card_number, directory in registry.items():
        if not is_hashed(directory.pin):
            directory.pin = hash_pin(directory.pin)
            updated_count += 1
            logger.info("Hashed PIN for card %s", mask_card(card_number))
    logger.info("PIN migration complete, hashed %d PINs", updated_count)
    return updated_count


def mask_card(card_number) -> str:
    digits = str(card_number)
    return digits[-4:].rjust(len(digits), "*")
