# taskmanager/services/mailer.py
import logging
from typing import Optional

import httpx

from taskmanager.core.config import settings
from taskmanager.core.errors import TransportError

log = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset Request"


def _reset_html(reset_link: str) -> str:
    minutes = settings.reset_token_expire_minutes
    return (
        "<h1>Password Reset Request</h1>"
        "<p>You requested a password reset. Click the link below to reset your password:</p>"
        f'<a href="{reset_link}">Reset Password</a>'
        f"<p>This link will expire in {minutes} minutes.</p>"
        "<p>If you didn't request this, please ignore this email.</p>"
    )


def send_password_reset(
    to_email: str,
    reset_link: str,
    client: Optional[httpx.Client] = None,
) -> None:
    """
    Deliver the reset link through the mail HTTP API (MAIL_API_URL).
    Without a configured API the link is only logged (local development).
    Raises TransportError when the API cannot be reached or rejects the message.
    """
    if not settings.mail_api_url:
        log.info("Password reset URL: %s", reset_link)
        return

    message = {
        "from": settings.mail_from,
        "to": to_email,
        "subject": RESET_SUBJECT,
        "html": _reset_html(reset_link),
        "text": f"Reset your password: {reset_link}",
    }
    headers = {}
    if settings.mail_api_key:
        headers["Authorization"] = f"Bearer {settings.mail_api_key}"

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.mail_timeout_seconds)
    try:
        r = http.post(settings.mail_api_url, json=message, headers=headers)
    except httpx.HTTPError as exc:
        raise TransportError(f"Mail API request failed: {exc}")
    finally:
        if owns_client:
            http.close()

    if r.status_code >= 300:
        raise TransportError(f"Mail API responded {r.status_code}")
    log.info("Password reset email dispatched")
