"""Password reset — issue a single-use, time-bounded token and consume it.

RequestPasswordReset never reveals whether an account exists: known and
unknown emails get the same acknowledgement, and unknown emails cause no
writes.

ResetPassword checks, in order: passwords match, token exists, token not
expired, password policy. The final write is conditional on the user still
holding the presented token, so two concurrent resets with the same token
cannot both succeed; the loser retries and fails as an invalid token.
"""

from datetime import UTC, datetime, timedelta
from urllib.parse import urlencode

import structlog
from notifications.channel import get_email_adapter
from notifications.templates import get_template
from protean import handle
from protean.fields import String
from shared import settings
from shared.errors import (
    InvalidToken,
    PasswordMismatch,
    PolicyViolation,
    StoreUnavailable,
    StoreValidationError,
    TokenExpired,
)
from shared.retry import conflict_retry

from identity.domain import identity
from identity.store import get_user_store
from identity.user.passwords import generate_reset_token, hash_password
from identity.user.user import User

logger = structlog.get_logger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists for that email, a password reset link is on its way"
PASSWORD_RESET_MESSAGE = "Your password has been reset"


@identity.command(part_of="User")
class RequestPasswordReset:
    email: String(max_length=254)


@identity.command(part_of="User")
class ResetPassword:
    reset_token: String(max_length=64)
    password: String(max_length=255, sanitize=False)
    confirm_password: String(max_length=255, sanitize=False)


def reset_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset?{urlencode({'resetToken': token})}"


def request_password_reset(store, mailer, email, now=None) -> dict:
    acknowledgement = {"message": RESET_REQUESTED_MESSAGE}

    user = store.find_by_email(email) if email else None
    if user is None:
        logger.info("Password reset requested for unknown email")
        return acknowledgement

    now = now or datetime.now(UTC)
    token = generate_reset_token()
    expiry = now + timedelta(seconds=settings.RESET_TOKEN_TTL_SECONDS)
    try:
        store.set_reset_token(user.id, token, expiry)
    except StoreUnavailable as exc:
        # Answer exactly as for an unknown email
        logger.error("Could not store password reset token", user_id=user.id, error=exc.detail)
        return acknowledgement
    logger.info("Password reset token issued", user_id=user.id, expires_at=expiry.isoformat())

    _send_reset_email(mailer, user, token)
    return acknowledgement


def _send_reset_email(mailer, user, token):
    rendered = get_template("password_reset").render(
        {
            "reset_url": reset_url(token),
            "expires_in_minutes": settings.RESET_TOKEN_TTL_SECONDS // 60,
        }
    )
    try:
        result = mailer.send(
            to=user.email,
            subject=rendered["subject"],
            body=rendered["body"],
            html_body=rendered["html_body"],
        )
    except Exception as exc:
        # The token is already stored; the user can request another email
        logger.error("Password reset email raised", user_id=user.id, error=str(exc))
        return

    if result.get("status") != "sent":
        logger.error("Password reset email not delivered", user_id=user.id, error=result.get("error"))
    else:
        logger.info("Password reset email sent", user_id=user.id, message_id=result.get("message_id"))


def reset_password(store, token, password, confirm_password, now=None) -> dict:
    if password != confirm_password:
        raise PasswordMismatch()

    _consume_token(store, token, password, now or datetime.now(UTC))
    return {"message": PASSWORD_RESET_MESSAGE}


@conflict_retry()
def _consume_token(store, token, password, now):
    user = store.find_by_reset_token(token) if token else None
    if user is None:
        raise InvalidToken()

    if user.reset_token_expired(now):
        logger.info("Expired reset token presented", user_id=user.id)
        raise TokenExpired()

    try:
        store.validate_password(password)
    except StoreValidationError as exc:
        logger.info("New password rejected by store policy", user_id=user.id, detail=exc.detail)
        raise PolicyViolation() from exc

    store.complete_password_reset(user.id, token, hash_password(password))
    logger.info("Password reset completed", user_id=user.id)


@identity.command_handler(part_of=User)
class PasswordResetHandler:
    @handle(RequestPasswordReset)
    def request_reset(self, command: RequestPasswordReset):
        return request_password_reset(get_user_store(), get_email_adapter(), command.email)

    @handle(ResetPassword)
    def reset(self, command: ResetPassword):
        return reset_password(
            get_user_store(),
            command.reset_token,
            command.password,
            command.confirm_password,
        )
