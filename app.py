import hmac
import logging
from functools import wraps

from flask import Flask, Response, current_app, jsonify, request

from atm_config import (
    configure_logging,
    get_admin_credentials,
    get_debug,
    get_http_bind,
    get_max_sessions,
)
from atm_errors import Result
from atm_session import SessionStore, TooManySessions, UnknownSession
from sample_bank import sample_bank

logger = logging.getLogger(__name__)


# ---------------- SECURITY ----------------
def check_auth(username, password):
    """Check if a username/password combination is valid."""
    admin_user, admin_password = get_admin_credentials()
    return (hmac.compare_digest((username or "").encode(), admin_user.encode())
            and hmac.compare_digest((password or "").encode(), admin_password.encode()))


def authenticate():
    """Sends a 401 response that enables basic auth"""
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'})


def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not check_auth(auth.username, auth.password):
            return authenticate()
        return f(*args, **kwargs)
    return decorated


# ---------------- HELPERS ----------------
def result_response(result: Result, **extra):
    if result.ok:
        return jsonify({"status": "success", **extra})
    return jsonify({
        "status": "error",
        "error": result.kind.value,
        "message": result.error.message,
    })


def bad_request(message):
    logger.warning("Bad request to %s: %s", request.path, message)
    return jsonify({"status": "error", "message": message}), 400


def required_field(name, kind):
    data = request.get_json(silent=True) or {}
    value = data.get(name)
    # bool is an int subclass, reject it explicitly
    if value is None or isinstance(value, bool) or not isinstance(value, kind):
        return None
    return value


def sessions() -> SessionStore:
    return current_app.extensions["atm_sessions"]


def session_route(f):
    @wraps(f)
    def decorated(session_id, *args, **kwargs):
        try:
            session = sessions().get(session_id)
        except UnknownSession:
            return jsonify({"status": "error", "message": "Unknown session"}), 404
        return f(session, *args, **kwargs)
    return decorated


# ---------------- APP ----------------
def create_app(bank=None):
    app = Flask(__name__)
    app.config["BANK"] = bank if bank is not None else sample_bank()
    app.extensions["atm_sessions"] = SessionStore(app.config["BANK"], max_sessions=get_max_sessions())

    @app.route("/session", methods=["POST"])
    def open_session():
        try:
            session_id = sessions().open()
        except TooManySessions as e:
            logger.warning("%s", e)
            return jsonify({"status": "error", "message": "Too many open sessions"}), 503
        return jsonify({"status": "success", "session_id": session_id}), 201

    @app.route("/session/<session_id>", methods=["DELETE"])
    def close_session(session_id):
        if not sessions().close(session_id):
            return jsonify({"status": "error", "message": "Unknown session"}), 404
        return jsonify({"status": "success", "message": "Session closed"})

    @app.route("/session/<session_id>", methods=["GET"])
    @session_route
    def session_status(session):
        return jsonify({
            "status": "success",
            "state": session.state.name,
            "account": session.selected_account,
        })

    @app.route("/session/<session_id>/card", methods=["POST"])
    @session_route
    def insert_card(session):
        card_number = required_field("card_number", int)
        if card_number is None:
            return bad_request("card_number (integer) required")
        return result_response(session.insert_card(card_number), message="Card accepted")

    @app.route("/session/<session_id>/card", methods=["DELETE"])
    @session_route
    def remove_card(session):
        return result_response(session.remove_card(), message="Card removed")

    @app.route("/session/<session_id>/pin", methods=["POST"])
    @session_route
    def enter_pin(session):
        pin = required_field("pin", str)
        if pin is None:
            return bad_request("pin (string) required")
        return result_response(session.enter_pin(pin), message="PIN Accepted")

    @app.route("/session/<session_id>/account", methods=["POST"])
    @session_route
    def select_account(session):
        account = required_field("account", str)
        if account is None:
            return bad_request("account (string) required")
        result = session.select_account(account)
        return result_response(result, account=account, balance=result.value)

    @app.route("/session/<session_id>/balance", methods=["GET"])
    @session_route
    def see_balance(session):
        result = session.see_balance()
        return result_response(result, balance=result.value)

    @app.route("/session/<session_id>/withdraw", methods=["POST"])
    @session_route
    def withdraw(session):
        amount = required_field("amount", int)
        if amount is None:
            return bad_request("amount (integer) required")
        result = session.withdraw(amount)
        if not result.ok:
            return result_response(result)
        return result_response(result, message="Take your cash", amount=result.value,
                               balance=session.see_balance().value)

    @app.route("/session/<session_id>/deposit", methods=["POST"])
    @session_route
    def deposit(session):
        amount = required_field("amount", int)
        if amount is None:
            return bad_request("amount (integer) required")
        result = session.deposit(amount)
        return result_response(result, message="Deposit accepted", balance=result.value)

    # ---------------- ADMIN DASHBOARD ----------------
    @app.route("/admin")
    @requires_auth
    def admin_dashboard():
        summary = current_app.config["BANK"].summary()
        cards = [
            {"card_id": card_number, "accounts": accounts}
            for card_number, accounts in sorted(summary.items())
        ]
        return jsonify({"status": "success", "card_count": len(cards), "cards": cards})

    return app


if __name__ == "__main__":
    configure_logging()
    host, port = get_http_bind()
    create_app().run(host=host, port=port, debug=get_debug())
