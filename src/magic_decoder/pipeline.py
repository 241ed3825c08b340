"""Pipeline runner — apply extractors to one destination, in order.

``decode`` is the entry point handlers call::

    @dataclass
    class Item:
        id: int = tag(0, path="id")
        pet: str = tag("", form="pet")
        money: float = 0.0

    item = Item()
    decode(item, request, query_params(), path_params(), json_body())

Extractors run strictly in the order given. The first one that raises
stops the pipeline; fields bound by earlier extractors stay bound, and
later extractors never run. Where two sources bind the same field, the
last one to run wins.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from magic_decoder._internal.types import Extractor
from magic_decoder.binding.fields import is_mutable_record, is_mutable_record_type
from magic_decoder.errors import DestinationError
from magic_decoder.http.request import Request

logger = logging.getLogger("magic_decoder.pipeline")

T = TypeVar("T")


def decode(destination: Any, request: Request, *extractors: Extractor | None) -> None:
    """Populate *destination* from *request* by running each extractor in turn.

    ``None`` entries are skipped, so optional sources can be spliced in
    conditionally.

    Raises:
        DestinationError: *destination* is not a mutable dataclass instance.
            Checked before any extractor runs, even when there are none.
        DecoderError: Whatever the first failing extractor raised.
    """
    if not is_mutable_record(destination):
        raise DestinationError(destination)

    for extractor in extractors:
        if extractor is None:
            continue
        try:
            extractor(destination, request)
        except Exception:
            logger.debug(
                "Decoding %s from %s %s stopped at %r",
                type(destination).__name__,
                request.method,
                request.path,
                extractor,
            )
            raise


def decoder_for(cls: type[T], *extractors: Extractor | None) -> Callable[[Request], T]:
    """Build a request decoder that returns a fresh, populated *cls* per call.

    Useful where a transport layer wants a ``request -> payload`` function::

        decode_item = decoder_for(Item, path_params(), json_body())
        item = decode_item(request)

    *cls* must be a non-frozen dataclass whose fields all have defaults.

    Raises:
        DestinationError: *cls* is not a non-frozen dataclass type.
    """
    if not is_mutable_record_type(cls):
        raise DestinationError(cls)

    def decode_request(request: Request) -> T:
        destination = cls()
        decode(destination, request, *extractors)
        return destination

    return decode_request
