"""Source extractors — one per request aspect.

Each factory returns an ``Extractor``: a callable taking
``(destination, request)`` that harvests a raw value map from one part of
the request and binds it onto the destination. Pass them to ``decode``::

    decode(item, request, query_params(), path_params(), json_body())

Namespaces are fixed per source: path variables bind through the
``path`` tag, query values through the ``form`` tag (for both the
all-keys and the named-keys variants), and the body through ``json``.
"""

from typing import Any

from magic_decoder._internal.types import Extractor
from magic_decoder.binding.body import bind_json, decode_json
from magic_decoder.binding.coerce import populate
from magic_decoder.config import DEFAULT_CONFIG
from magic_decoder.errors import BodyError
from magic_decoder.http.request import Request


def path_params(
    *names: str,
    tag: str = DEFAULT_CONFIG.path_tag,
    separator: str = DEFAULT_CONFIG.list_separator,
) -> Extractor:
    """Bind variables captured by the router match.

    With no *names*, every variable the match captured is offered to the
    binder. With *names*, only those keys are read; a name the match did
    not capture reads as empty and its field is left alone.
    """

    def extract(destination: Any, request: Request) -> None:
        captured = request.path_params
        if names:
            values = {name: captured.get(name, "") for name in names}
        else:
            values = dict(captured)
        populate(tag, values, destination, separator=separator)

    return extract


def query_params(
    *names: str,
    tag: str = DEFAULT_CONFIG.query_tag,
    separator: str = DEFAULT_CONFIG.list_separator,
) -> Extractor:
    """Bind query string values (the first value of each key).

    With no *names*, every key in the query string is offered to the
    binder; with *names*, only those keys are read.
    """

    def extract(destination: Any, request: Request) -> None:
        query = request.query
        if names:
            values = {name: query.get(name) or "" for name in names}
        else:
            values = query.first_values()
        populate(tag, values, destination, separator=separator)

    return extract


def json_body(tag: str = DEFAULT_CONFIG.body_tag) -> Extractor:
    """Bind the JSON request body.

    Uses the body binder's own conventions rather than the string
    coercion engine. An absent body, undecodable bytes, or a document
    that is not an object all raise ``BodyError``.
    """

    def extract(destination: Any, request: Request) -> None:
        if request.body is None:
            msg = "empty request body"
            raise BodyError(msg)
        bind_json(decode_json(request.body), destination, tag)

    return extract
