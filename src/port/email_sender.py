"""Email port: outbound interface for transactional mail."""

from typing import Protocol

from domain.model.email import EmailResult


class EmailSender(Protocol):

    async def send_password_reset_email(self, address: str, reset_url: str) -> EmailResult:
        """Deliver a password reset link. Failures are reported, not raised."""
        ...
