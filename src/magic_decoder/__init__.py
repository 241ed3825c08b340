"""magic_decoder — declarative request decoding into dataclasses.

Tag dataclass fields with the request source they come from, then run
the extractors you need, in the order you need them.

Basic usage::

    from dataclasses import dataclass

    from magic_decoder import decode, json_body, path_params, query_params, tag

    @dataclass
    class Item:
        id: int = tag(0, path="id")
        name: str = tag("", form="name")
        pet: str = tag("", form="pet")
        money: float = tag(0.0, json="money")

    item = Item()
    decode(item, request, query_params(), path_params(), json_body())
"""

__version__ = "0.1.0-dev"
__all__ = [
    "DEFAULT_CONFIG",
    "BodyError",
    "ConfigurationError",
    "DecoderConfig",
    "DecoderError",
    "DestinationError",
    "ParseError",
    "Request",
    "RequestTooLarge",
    "UInt",
    "decode",
    "decoder_for",
    "json_body",
    "path_params",
    "populate",
    "query_params",
    "tag",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import magic_decoder`` fast while providing a clean top-level API.
    """
    if name in ("decode", "decoder_for"):
        from magic_decoder import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name in ("json_body", "path_params", "query_params"):
        from magic_decoder import extractors as _extractors

        return getattr(_extractors, name)

    if name in ("tag", "UInt"):
        from magic_decoder.binding import fields as _fields

        return getattr(_fields, name)

    if name == "populate":
        from magic_decoder.binding.coerce import populate

        return populate

    if name in ("DecoderConfig", "DEFAULT_CONFIG"):
        from magic_decoder import config as _config

        return getattr(_config, name)

    if name == "Request":
        from magic_decoder.http.request import Request

        return Request

    if name in (
        "BodyError",
        "ConfigurationError",
        "DecoderError",
        "DestinationError",
        "ParseError",
        "RequestTooLarge",
    ):
        from magic_decoder import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
