"""magic_decoder exception hierarchy.

Shared across the binding engine, extractors, and pipeline so every
module raises and catches the same types.
"""

from typing import Any


class DecoderError(Exception):
    """Base for all magic_decoder errors."""


class ConfigurationError(DecoderError):
    """Raised when a config value is invalid."""


class DestinationError(DecoderError, TypeError):
    """The destination is not a mutable dataclass instance.

    A usage error rather than a data error: the caller handed the
    decoder something it can never populate.
    """

    def __init__(self, destination: Any) -> None:
        self.destination = destination
        super().__init__(f"{destination!r} must be a mutable dataclass instance")


class ParseError(DecoderError, ValueError):
    """Raw text does not match the grammar of the field's declared kind.

    Carries enough context to point the caller at the offending input.
    The original ``ValueError`` (if any) is chained as ``__cause__``.
    """

    def __init__(self, field: str, key: str, value: str, kind: str, reason: str = "") -> None:
        self.field = field
        self.key = key
        self.value = value
        self.kind = kind
        self.reason = reason
        message = f"cannot parse {value!r} for field {field!r} (key {key!r}) as {kind}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class BodyError(DecoderError, ValueError):
    """The request body is absent, undecodable, or does not fit the destination."""


class RequestTooLarge(BodyError):  # noqa: N818
    """The request body exceeded the configured ``max_body_size``."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"request body exceeds {limit} bytes")

