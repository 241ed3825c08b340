"""Decoder configuration.

One frozen object holds the tag namespaces, list separator, and body
limits a decoder runs with. Extractors built from it carry those values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from magic_decoder.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from magic_decoder._internal.asgi import Receive, Scope
    from magic_decoder._internal.types import Extractor
    from magic_decoder.http.request import Request


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """Decoder configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DecoderConfig(query_tag="query", list_separator=";")
        decode(item, request, config.query_params(), config.json_body())
    """

    # Tag namespaces read from dataclass field metadata
    path_tag: str = "path"
    query_tag: str = "form"
    body_tag: str = "json"

    # Separator for list[int] / list[str] fields
    list_separator: str = ","

    # Limits
    max_body_size: int = 1024 * 1024  # 1 MiB
    read_timeout: float | None = None  # seconds; None waits indefinitely

    def __post_init__(self) -> None:
        for name in ("path_tag", "query_tag", "body_tag"):
            if not getattr(self, name):
                msg = f"DecoderConfig.{name} must be a non-empty string"
                raise ConfigurationError(msg)
        if not self.list_separator:
            msg = "DecoderConfig.list_separator must be a non-empty string"
            raise ConfigurationError(msg)
        if self.max_body_size <= 0:
            msg = f"DecoderConfig.max_body_size must be positive, got {self.max_body_size}"
            raise ConfigurationError(msg)
        if self.read_timeout is not None and self.read_timeout <= 0:
            msg = f"DecoderConfig.read_timeout must be positive or None, got {self.read_timeout}"
            raise ConfigurationError(msg)

    # -- Extractor factories bound to this config --

    def path_params(self, *names: str) -> Extractor:
        """Path-parameter extractor using this config's tag and separator."""
        from magic_decoder.extractors import path_params

        return path_params(*names, tag=self.path_tag, separator=self.list_separator)

    def query_params(self, *names: str) -> Extractor:
        """Query-parameter extractor using this config's tag and separator."""
        from magic_decoder.extractors import query_params

        return query_params(*names, tag=self.query_tag, separator=self.list_separator)

    def json_body(self) -> Extractor:
        """JSON body extractor using this config's tag."""
        from magic_decoder.extractors import json_body

        return json_body(tag=self.body_tag)

    async def request_from_asgi(
        self,
        scope: Scope,
        receive: Receive,
        path_params: Mapping[str, str] | None = None,
    ) -> Request:
        """Build a ``Request`` honouring this config's body size and read timeout."""
        from magic_decoder.http.request import Request

        return await Request.from_asgi(
            scope,
            receive,
            path_params,
            max_body_size=self.max_body_size,
            read_timeout=self.read_timeout,
        )


DEFAULT_CONFIG = DecoderConfig()
