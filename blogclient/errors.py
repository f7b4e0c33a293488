from __future__ import annotations

from blogclient.html_utils import escape_html

SNIPPET_LIMIT = 200


def snippet(text: str | None, limit: int = SNIPPET_LIMIT) -> str:
    return (text or "")[:limit]


class TransportError(Exception):
    """
    Base of the closed set of failures the transport may raise.

    Only HttpError, InvalidContentType and NetworkFailure derive from it;
    describe_error() must be updated together with any change here.
    """


class HttpError(TransportError):
    def __init__(self, status: int, status_text: str, body_snippet: str = ""):
        self.status = status
        self.status_text = status_text
        self.body_snippet = snippet(body_snippet)
        super().__init__(f"HTTP {status} {status_text}")


class InvalidContentType(TransportError):
    def __init__(self, body_snippet: str = ""):
        self.body_snippet = snippet(body_snippet)
        super().__init__("Invalid JSON")


class NetworkFailure(TransportError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FormValidationError(ValueError):
    """Raised before any request when the create form is incomplete."""


def describe_error(err: TransportError) -> str:
    """
    Human-readable, HTML-escaped rendering of a transport failure.

    - HttpError: "HTTP <status> <text>[: <snippet>]"
    - InvalidContentType: "Invalid JSON[: <snippet>]"
    - NetworkFailure: "Network error"
    """
    if isinstance(err, HttpError):
        extra = f": {escape_html(err.body_snippet)}" if err.body_snippet else ""
        return f"HTTP {err.status} {escape_html(err.status_text or '')}{extra}"
    if isinstance(err, InvalidContentType):
        extra = f": {escape_html(err.body_snippet)}" if err.body_snippet else ""
        return f"Invalid JSON{extra}"
    if isinstance(err, NetworkFailure):
        return "Network error"
    raise TypeError(f"Unclassified transport error: {type(err).__name__}")
