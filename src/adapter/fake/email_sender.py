"""In-memory implementation of EmailSender for testing."""

from domain.model.email import EmailResult


class FakeEmailSender:
    """Records outgoing mail and returns a preconfigured result."""

    def __init__(self, result: EmailResult | None = None):
        self.result = result or EmailResult(message="Email sent")
        self.sent: list[tuple[str, str]] = []

    async def send_password_reset_email(self, address: str, reset_url: str) -> EmailResult:
        self.sent.append((address, reset_url))
        return self.result
