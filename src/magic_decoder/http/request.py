"""Immutable HTTP request.

Frozen metadata plus the already-received body. Extractors read from it;
nothing in the decoder ever mutates or re-reads it.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import anyio

from magic_decoder._internal.asgi import Receive, Scope
from magic_decoder.config import DEFAULT_CONFIG
from magic_decoder.errors import RequestTooLarge
from magic_decoder.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``body`` is ``None`` when the request carries no body at all, and
    ``b""`` when it carries an empty one. The JSON extractor rejects both,
    with different messages.

    ``path_params`` holds the variables captured by the caller's router, e.g.
    ``{"id": "2"}`` for ``/foo/{id}`` against ``/foo/2``.
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=QueryParams)
    path_params: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying *path_params* (typically a router match)."""
        return dataclasses.replace(self, path_params=dict(path_params))

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        *,
        body: bytes | str | None = None,
        path_params: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a Request from a method and a request target like ``/foo/2?pet=cat``."""
        parts = urlsplit(target)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=QueryParams(parts.query),
            path_params=dict(path_params or {}),
            body=body,
        )

    @classmethod
    async def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        path_params: Mapping[str, str] | None = None,
        *,
        max_body_size: int = DEFAULT_CONFIG.max_body_size,
        read_timeout: float | None = DEFAULT_CONFIG.read_timeout,
    ) -> Request:
        """Create a Request from an ASGI scope, draining *receive* once.

        Raises:
            RequestTooLarge: The body grew past *max_body_size* bytes.
            TimeoutError: The body did not arrive within *read_timeout* seconds.
        """
        chunks: list[bytes] = []
        size = 0
        with anyio.fail_after(read_timeout):
            while True:
                message = await receive()
                chunk = message.get("body", b"")
                if chunk:
                    size += len(chunk)
                    if size > max_body_size:
                        raise RequestTooLarge(max_body_size)
                    chunks.append(chunk)
                if not message.get("more_body", False):
                    break

        return cls(
            method=scope["method"],
            path=scope["path"],
            query=QueryParams(scope.get("query_string", b"")),
            path_params=dict(path_params or {}),
            body=b"".join(chunks),
        )
