"""HTTP email API adapter.

Implements EmailSender by posting a JSON message to a transactional mail
endpoint (Resend/Postmark style: bearer key, `from`/`to`/`subject`/`html`).

Configuration:
    EMAIL_API_URL  - endpoint receiving POSTed messages
    EMAIL_API_KEY  - bearer token for the endpoint
    EMAIL_FROM     - sender address
"""

import logging
import os

import httpx

from domain.model.email import EmailResult

logger = logging.getLogger(__name__)

EMAIL_API_URL = os.getenv("EMAIL_API_URL")
EMAIL_API_KEY = os.getenv("EMAIL_API_KEY")
EMAIL_FROM = os.getenv("EMAIL_FROM", "Shopery <no-reply@shopery.app>")
API_TIMEOUT_SECONDS = 10.0

RESET_SUBJECT = "Reset your password"
SEND_FAILED_MESSAGE = "Unable to send password reset email"


def render_reset_email(reset_url: str) -> str:
    return (
        "<p>You requested a password reset.</p>"
        f'<p><a href="{reset_url}">Click here to choose a new password</a>. '
        "The link expires in 15 minutes.</p>"
        "<p>If you did not request this, you can ignore this email.</p>"
    )


class HttpEmailAdapter:
    """Sends transactional mail through an HTTP email API. Never retries."""

    def __init__(
        self,
        api_url: str | None = EMAIL_API_URL,
        api_key: str | None = EMAIL_API_KEY,
        sender: str = EMAIL_FROM,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender

    async def send_password_reset_email(self, address: str, reset_url: str) -> EmailResult:
        if not self.api_url:
            logger.error("Email API not configured", extra={"to": address})
            return EmailResult(error=True, code=500, message="Email service is not configured")

        payload = {
            "from": self.sender,
            "to": [address],
            "subject": RESET_SUBJECT,
            "html": render_reset_email(reset_url),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Email API HTTP error",
                extra={"to": address, "status_code": e.response.status_code},
            )
            return EmailResult(error=True, code=502, message=SEND_FAILED_MESSAGE)
        except httpx.RequestError as e:
            logger.warning(
                "Email API request error",
                extra={"to": address, "error_type": type(e).__name__},
            )
            return EmailResult(error=True, code=503, message=SEND_FAILED_MESSAGE)

        logger.info("Password reset email sent", extra={"to": address})
        return EmailResult(message="Email sent")
