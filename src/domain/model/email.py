from dataclasses import dataclass


@dataclass(frozen=True)
class EmailResult:
    """Delivery outcome reported by an email sender."""
    error: bool = False
    code: int = 200
    message: str = ""
