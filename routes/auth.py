"""Authentication blueprint: registration, login, email verification and password reset."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import (
    BadRequest,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)

from models.account import Account
from schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from services.email_service import (
    EmailDeliveryError,
    Mailer,
    send_password_reset_email,
    send_verification_email,
)
from storage import AccountStore, DuplicateEmailError
from utils.request_validation import parse_request_body
from utils.security import hash_password
from utils.tokens import (
    attach_session_cookie,
    clear_session_cookie,
    generate_ephemeral_token,
    session_cookie_value,
    verify_session_token,
)

auth_bp = Blueprint("auth", __name__)

EMAIL_TAKEN = "Email already registered"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_RESET_TOKEN = "Invalid or expired reset token"
INVALID_VERIFICATION_TOKEN = "Invalid or expired verification token"
FORGOT_PASSWORD_MESSAGE = (
    "If an account exists with this email, you will receive password reset instructions."
)


class EmailNotVerified(Forbidden):
    """403 raised when a correct account has not confirmed its email yet."""

    description = "Please verify your email before logging in"

    def __init__(self, email: str):
        super().__init__()
        self.extra = {"requiresVerification": True, "email": email}


def _store() -> AccountStore:
    return current_app.extensions["account_store"]


def _mailer() -> Mailer:
    return current_app.extensions["mailer"]


def _query_token() -> str:
    token = (request.args.get("token") or "").strip()
    if not token:
        raise BadRequest("Token is required")
    return token


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Create an unverified account and mail out its verification link."""
    data = parse_request_body(request, RegisterRequest)
    store = _store()

    if store.get_by_email(data.email) is not None:
        raise BadRequest(EMAIL_TAKEN)

    ttl = current_app.config["VERIFICATION_TOKEN_TTL_MINUTES"]
    token, expiry = generate_ephemeral_token(ttl)

    account = Account(
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        organization_name=data.organization_name,
        phone=data.phone,
        role=data.role,
        is_email_verified=False,
    )
    account.set_password(data.password)
    account.set_verification_token(token, expiry)

    try:
        store.create(account)
    except DuplicateEmailError:
        raise BadRequest(EMAIL_TAKEN)

    # Registration stands even when the mail cannot go out.
    try:
        send_verification_email(
            _mailer(), current_app.config["APP_URL"], data.email, token, data.first_name, ttl
        )
    except EmailDeliveryError:
        current_app.logger.exception(
            "Verification email to %s failed; account %s kept", data.email, account.id
        )

    return (
        jsonify(
            {
                "message": "Registration successful! Please check your email to verify your account.",
                "userId": account.id,
                "email": account.email,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    """Check credentials and start a cookie session for verified accounts."""
    data = parse_request_body(request, LoginRequest)
    store = _store()

    account = store.get_by_email(data.email, include_hidden=True)
    if account is None:
        raise Unauthorized(INVALID_CREDENTIALS)

    if not account.is_email_verified:
        raise EmailNotVerified(account.email)

    if not account.check_password(data.password):
        raise Unauthorized(INVALID_CREDENTIALS)

    account.record_login()
    store.save(account)

    response = jsonify({"message": "Login successful", "user": account.to_dict()})
    attach_session_cookie(response, account.id)
    return response, HTTPStatus.OK


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"message": "Logged out successfully"})
    clear_session_cookie(response)
    return response, HTTPStatus.OK


@auth_bp.route("/me", methods=["GET"])
def me():
    """Return the profile of the account behind the session cookie."""
    token = session_cookie_value()
    if not token:
        raise Unauthorized("Not authenticated")

    account_id = verify_session_token(token)
    if account_id is None:
        raise Unauthorized("Invalid or expired token")

    account = _store().get_by_id(account_id)
    if account is None:
        raise NotFound("User not found")

    return jsonify({"user": account.to_dict(include_profile=True)}), HTTPStatus.OK


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """Issue a reset token; the reply is the same whether or not the email is known."""
    data = parse_request_body(request, ForgotPasswordRequest)
    store = _store()

    account = store.get_by_email(data.email)
    if account is not None:
        ttl = current_app.config["RESET_TOKEN_TTL_MINUTES"]
        token, expiry = generate_ephemeral_token(ttl)
        email, first_name = account.email, account.first_name

        account.set_reset_token(token, expiry)
        store.save(account)

        try:
            send_password_reset_email(
                _mailer(), current_app.config["APP_URL"], email, token, first_name, ttl
            )
        except EmailDeliveryError as exc:
            current_app.logger.exception("Password reset email to %s failed", email)
            raise InternalServerError(
                "Failed to send reset email. Please try again later."
            ) from exc

    return jsonify({"message": FORGOT_PASSWORD_MESSAGE}), HTTPStatus.OK


@auth_bp.route("/reset-password", methods=["GET"])
def validate_reset_token():
    token = _query_token()
    if _store().get_by_reset_token(token) is None:
        raise BadRequest(INVALID_RESET_TOKEN)
    return jsonify({"valid": True, "message": "Token is valid"}), HTTPStatus.OK


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    """Replace the password of the account holding a live reset token."""
    data = parse_request_body(request, ResetPasswordRequest)

    account = _store().claim_reset_token(data.token, hash_password(data.password))
    if account is None:
        raise BadRequest(INVALID_RESET_TOKEN)

    current_app.logger.info("Password reset for account %s", account.id)
    return jsonify({"message": "Password has been reset successfully!"}), HTTPStatus.OK


@auth_bp.route("/verify-email", methods=["GET"])
def validate_verification_token():
    token = _query_token()
    account = _store().get_by_verification_token(token)
    if account is None:
        raise BadRequest(INVALID_VERIFICATION_TOKEN)
    return jsonify({"valid": True, "email": account.email}), HTTPStatus.OK


@auth_bp.route("/verify-email", methods=["POST"])
def verify_email():
    """Redeem a verification token and sign the account in."""
    data = parse_request_body(request, VerifyEmailRequest)

    account = _store().claim_verification_token(data.token)
    if account is None:
        raise BadRequest(INVALID_VERIFICATION_TOKEN)

    response = jsonify({"message": "Email verified successfully!", "user": account.to_dict()})
    attach_session_cookie(response, account.id)
    return response, HTTPStatus.OK
