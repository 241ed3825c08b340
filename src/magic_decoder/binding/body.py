"""JSON body binding.

Assigns a decoded JSON object onto a destination dataclass using the
``json`` tag convention: the key is the tag's first component, or the
field name when the field has no json tag. Keys match exactly first,
then case-insensitively. ``null`` leaves a field untouched; unknown keys
are ignored.

JSON values are converted to the annotated field kind. Numeric strings
bind into numeric fields through the same strict parsers the string
engine uses, so ``{"money": "12.34"}`` fills a ``float``. Integers are
held to 64 bits. Values that cannot be converted raise ``BodyError``.
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from magic_decoder.binding.coerce import parse_float, parse_int, parse_uint
from magic_decoder.binding.fields import SKIP_TAG, FieldKind, FieldSpec, field_table, is_mutable_record
from magic_decoder.errors import BodyError, DestinationError


def decode_json(raw: bytes) -> Any:
    """Decode request body bytes as JSON, raising ``BodyError`` on failure."""
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as exc:
        msg = f"malformed JSON body: {exc}"
        raise BodyError(msg) from exc


def bind_json(document: Any, destination: Any, namespace: str = "json") -> None:
    """Assign the decoded JSON *document* onto *destination*.

    Raises:
        DestinationError: *destination* is not a mutable dataclass instance.
        BodyError: *document* is not an object, or a value does not fit.
    """
    if not is_mutable_record(destination):
        raise DestinationError(destination)

    if not isinstance(document, Mapping):
        msg = f"JSON body must be an object, got {type(document).__name__}"
        raise BodyError(msg)

    folded = {k.lower(): k for k in document}

    for spec in field_table(type(destination)):
        if spec.kind is FieldKind.EMBEDDED:
            continue

        key = _json_key(spec, namespace)
        if key is None:
            continue

        if key not in document:
            key = folded.get(key.lower())
            if key is None:
                continue

        value = document[key]
        if value is None:
            continue

        setattr(destination, spec.name, _convert(spec, key, value))


def _json_key(spec: FieldSpec, namespace: str) -> str | None:
    raw = spec.tags.get(namespace)
    if raw is None:
        return spec.name
    key = str(raw).split(",", 1)[0]
    if key == SKIP_TAG:
        return None
    return key or spec.name


def _convert(spec: FieldSpec, key: str, value: Any) -> Any:
    """Convert a JSON *value* to ``spec.kind``."""
    match spec.kind:
        case FieldKind.BOOL:
            if isinstance(value, bool):
                return value
        case FieldKind.INT | FieldKind.UINT | FieldKind.FLOAT:
            number = _number(value, spec.kind)
            if number is not None:
                return number
        case FieldKind.STRING:
            if isinstance(value, str):
                return value
        case FieldKind.TIMESTAMP:
            moment = _iso(value)
            if moment is not None:
                return moment
        case FieldKind.INT_LIST:
            if isinstance(value, list) and all(_is_int(v) for v in value):
                items = [_number(v, FieldKind.INT) for v in value]
                if None not in items:
                    return items
        case FieldKind.STRING_LIST:
            if isinstance(value, list) and all(isinstance(v, str) for v in value):
                return list(value)
        case _:
            return value

    msg = (
        f"cannot bind JSON {type(value).__name__} {value!r} (key {key!r}) "
        f"to {spec.kind.value} field {spec.name!r}"
    )
    raise BodyError(msg)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# Text parsers shared with the string coercion engine
_NUMBER_PARSERS = {
    FieldKind.INT: parse_int,
    FieldKind.UINT: parse_uint,
    FieldKind.FLOAT: parse_float,
}


def _number(value: Any, kind: FieldKind) -> Any:
    """Return *value* converted for a numeric *kind*, or None if it does not fit."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, str):
            return _NUMBER_PARSERS[kind](value)
        if kind is FieldKind.FLOAT:
            if isinstance(value, int | float):
                number = float(value)
                return number if math.isfinite(number) else None
            return None
        if isinstance(value, float):
            if not value.is_integer():
                return None
            value = int(value)
        if isinstance(value, int):
            return _NUMBER_PARSERS[kind](str(value))
    except (ValueError, OverflowError):
        return None
    return None


def _iso(value: Any) -> datetime | None:
    """Parse an ISO-8601 string; naive results take the local zone."""
    if not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    return moment if moment.tzinfo is not None else moment.astimezone()
