from __future__ import annotations


class LoadError(Exception):
    """Raised when a project source cannot produce a usable snapshot.

    `cause` is the human-readable reason shown to the user; `kind` is the
    short error name used in API payloads and logs.
    """

    kind = "LoadError"

    def __init__(self, cause: str, *, source: str = "") -> None:
        self.cause = cause
        self.source = source
        super().__init__(f"{source}: {cause}" if source else cause)


class NetworkError(LoadError):
    """The resource could not be retrieved (transport failure or non-success status)."""

    kind = "NetworkError"


class ParseError(LoadError):
    """The response body is not valid JSON."""

    kind = "ParseError"


class ShapeError(LoadError):
    """The JSON parsed but is missing required fields or breaks a record invariant."""

    kind = "ShapeError"
