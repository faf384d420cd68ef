"""
Dashboard services - admin password reset email via Resend.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlencode, urlsafe_base64_encode

import resend

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Reset your Tableside password"


class EmailError(Exception):
    """Raised when email sending fails."""

    pass


def build_reset_link(user) -> str:
    """Password reset link carrying the user's uid and a one-time token."""
    query = urlencode(
        {
            "uid": urlsafe_base64_encode(force_bytes(user.pk)),
            "token": default_token_generator.make_token(user),
        }
    )
    return f"{settings.PASSWORD_RESET_URL}?{query}"


def send_password_reset(email: str) -> str | None:
    """
    Email reset instructions to the account registered under email.

    Unknown addresses are logged and skipped so callers cannot probe which
    accounts exist.

    Args:
        email: Address the admin typed on the login form

    Returns:
        Resend email ID, or None if no active account uses this address

    Raises:
        EmailError: If the email is missing or sending fails
    """
    if not email:
        raise EmailError("Email address is required")

    user = (
        get_user_model()
        .objects.filter(email__iexact=email.strip(), is_active=True)
        .first()
    )
    if user is None:
        logger.info("Password reset requested for unknown email %s", email)
        return None

    api_key = getattr(settings, "RESEND_API_KEY", None)
    if not api_key:
        raise EmailError("Resend API key not configured")

    resend.api_key = api_key

    body = (
        "Someone asked to reset the password for your Tableside admin account.\n\n"
        f"Follow this link to choose a new password:\n{build_reset_link(user)}\n\n"
        "If you did not ask for this, you can ignore this email."
    )

    try:
        response = resend.Emails.send(
            {
                "from": settings.DEFAULT_FROM_EMAIL,
                "to": user.email,
                "subject": PASSWORD_RESET_SUBJECT,
                "text": body,
            }
        )

        email_id = response.get("id", "") if isinstance(response, dict) else ""

        logger.info("Sent password reset to %s (ID: %s)", user.email, email_id)

        return str(email_id)

    except Exception as e:
        logger.exception("Failed to send password reset to %s: %s", user.email, e)
        raise EmailError(f"Failed to send email: {e}") from e
