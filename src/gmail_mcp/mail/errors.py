"""Shared error types for mail transports.

Messages are surfaced to the calling client, so they never include
passwords, client secrets, or tokens.
"""


class MailError(Exception):
    """Base error for all delivery failures."""


class InvalidAddressError(MailError):
    """A sender or recipient address is syntactically invalid."""

    def __init__(self, role: str, address: str, detail: str = "") -> None:
        self.role = role
        self.address = address
        msg = f"Invalid '{role}' address: {address!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class AttachmentReadError(MailError):
    """The attachment file could not be read."""

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to read attachment file {path}" + (f": {detail}" if detail else ""))


class MailAuthError(MailError):
    """The transport could not authenticate with the mail provider."""


class MissingCredentialsError(MailAuthError):
    """No credentials were configured for the active transport."""


class DeliveryError(MailError):
    """The provider or relay rejected the message, or the network failed."""


class InvalidHeaderError(MailError):
    """A header value (subject, attachment filename) contains a line break."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: header values cannot contain line breaks")
