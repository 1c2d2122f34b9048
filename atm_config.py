import logging
import os

DEFAULT_ADMIN_USER = "admin"
DEFAULT_ADMIN_PASSWORD = "secure_password"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_SESSIONS = 1000
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_admin_credentials() -> tuple[str, str]:
    user = os.getenv("ATM_ADMIN_USER") or DEFAULT_ADMIN_USER
    password = os.getenv("ATM_ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD
    return user, password


def get_http_bind() -> tuple[str, int]:
    host = os.getenv("ATM_HOST", DEFAULT_HOST)
    port = int(os.getenv("ATM_PORT", str(DEFAULT_PORT)))
    return host, port


def get_debug() -> bool:
    return os.getenv("ATM_DEBUG", "0").strip().lower() in ("1", "true", "yes")


def get_log_level() -> str:
    return (os.getenv("ATM_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()


def configure_logging() -> None:
    logging.basicConfig(format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist, the level still applies
    logging.getLogger().setLevel(get_log_level())


def get_max_sessions() -> int:
    return int(os.getenv("ATM_MAX_SESSIONS", str(DEFAULT_MAX_SESSIONS)))
