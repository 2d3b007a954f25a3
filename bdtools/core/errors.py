"""Errors raised by the Black Duck connection layer."""


class RequestFailed(Exception):
    """A Black Duck REST call failed at the transport or HTTP level."""

    def __init__(self, message: str, status: int = 0, url: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        if self.status:
            return f"[{self.status}] {self.message}"
        return self.message


class AuthenticationFailed(RequestFailed):
    """The API token could not be exchanged for a bearer token."""
