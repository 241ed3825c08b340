"""Tag-driven field population from a string-keyed value map.

``populate`` walks a destination dataclass's field table, matches each
field's tag for one namespace against a raw value map, and assigns the
value converted to the field's declared kind.

Binding rules:

- A missing map is a no-op; a field whose key is absent or empty is skipped.
- Numeric, timestamp, and list-element text that does not parse raises
  ``ParseError`` immediately. Fields already bound stay bound.
- Boolean text outside the vocabulary, timestamps shorter than eight
  characters, and unsupported field kinds leave the field untouched.
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any

from magic_decoder.binding.fields import FieldKind, FieldSpec, field_table, is_mutable_record
from magic_decoder.errors import DestinationError, ParseError

logger = logging.getLogger("magic_decoder.binding")

TRUE_WORDS = frozenset({"on", "1", "yes", "true"})
FALSE_WORDS = frozenset({"off", "0", "no", "false"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

# Spellings that legitimately parse to infinity
_INF_WORDS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})

# Timestamp layouts, longest first. Each length class truncates the input
# to its own width and must parse with its own layout; there is no fallback.
_OFFSET_DATETIME_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})"
    r"T([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?"
    r"(Z|[+-][0-9]{2}:[0-9]{2})"
)
_DATETIME_T_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})")
_DATETIME_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2}) ([0-9]{2}):([0-9]{2}):([0-9]{2})")
_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})")


def populate(
    namespace: str,
    values: Mapping[str, str] | None,
    destination: Any,
    *,
    separator: str = ",",
) -> None:
    """Bind *values* onto *destination* fields tagged under *namespace*.

    Args:
        namespace: Tag namespace to read (``"path"``, ``"form"``, ...).
        values: Raw value map for one request source. ``None`` is a no-op.
        destination: A mutable dataclass instance, mutated in place.
        separator: Split character for ``list[int]`` / ``list[str]`` fields.

    Raises:
        DestinationError: *destination* is not a mutable dataclass instance.
        ParseError: A value does not parse as its field's kind.
    """
    if values is None:
        return

    if not is_mutable_record(destination):
        raise DestinationError(destination)

    for spec in field_table(type(destination)):
        if spec.kind is FieldKind.EMBEDDED:
            continue

        key = spec.tag(namespace)
        if key is None:
            continue

        raw = values.get(key, "")
        if not raw:
            continue

        _assign(destination, spec, key, raw, separator)


def _assign(destination: Any, spec: FieldSpec, key: str, raw: str, separator: str) -> None:
    """Coerce *raw* by ``spec.kind`` and set it on *destination*."""
    match spec.kind:
        case FieldKind.BOOL:
            flag = parse_bool(raw)
            if flag is not None:
                setattr(destination, spec.name, flag)
        case FieldKind.INT:
            setattr(destination, spec.name, _parse_or_raise(parse_int, spec, key, raw))
        case FieldKind.UINT:
            setattr(destination, spec.name, _parse_or_raise(parse_uint, spec, key, raw))
        case FieldKind.FLOAT:
            setattr(destination, spec.name, _parse_or_raise(parse_float, spec, key, raw))
        case FieldKind.STRING | FieldKind.ANY:
            setattr(destination, spec.name, raw)
        case FieldKind.TIMESTAMP:
            moment = _parse_or_raise(parse_timestamp, spec, key, raw)
            if moment is not None:
                setattr(destination, spec.name, moment)
        case FieldKind.INT_LIST:
            pieces = raw.split(separator)
            # Assigned before parsing: elements bound ahead of a bad piece remain
            items = [0] * len(pieces)
            setattr(destination, spec.name, items)
            for i, piece in enumerate(pieces):
                items[i] = _parse_or_raise(parse_int, spec, key, piece)
        case FieldKind.STRING_LIST:
            setattr(destination, spec.name, raw.split(separator))
        case _:
            logger.debug(
                "Skipping %s.%s: unsupported field type",
                type(destination).__name__,
                spec.name,
            )


def _parse_or_raise(parser: Any, spec: FieldSpec, key: str, raw: str) -> Any:
    try:
        return parser(raw)
    except ValueError as exc:
        raise ParseError(spec.name, key, raw, spec.kind.value, str(exc)) from exc


# -- Scalar parsers --


def parse_bool(raw: str) -> bool | None:
    """Return True/False for recognised words (case-insensitive), else None."""
    word = raw.lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


def parse_int(raw: str) -> int:
    """Parse a base-10 signed 64-bit integer.

    Stricter than ``int()``: no surrounding whitespace, no ``_`` separators.
    """
    if not _INT_RE.fullmatch(raw):
        msg = "invalid syntax"
        raise ValueError(msg)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def parse_uint(raw: str) -> int:
    """Parse a base-10 unsigned 64-bit integer."""
    if not _UINT_RE.fullmatch(raw):
        msg = "invalid syntax"
        raise ValueError(msg)
    value = int(raw)
    if value > _UINT64_MAX:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def parse_float(raw: str) -> float:
    """Parse an ASCII decimal or scientific float.

    ``inf`` and ``nan`` spellings are accepted; a finite literal too large
    for a float is out of range.
    """
    if not raw.isascii() or raw != raw.strip() or "_" in raw:
        msg = "invalid syntax"
        raise ValueError(msg)
    value = float(raw)
    if math.isinf(value) and raw.lower() not in _INF_WORDS:
        msg = "value out of range"
        raise ValueError(msg)
    return value


def parse_timestamp(raw: str) -> datetime | None:
    """Parse *raw* by its length class. Returns None if under eight characters.

    ==========  ========  ====================================
    length      truncate  layout
    ==========  ========  ====================================
    >= 25       25        ``YYYY-MM-DDTHH:MM:SS[.f]Z|±HH:MM``
    >= 19, T    19        ``YYYY-MM-DDTHH:MM:SS`` (local)
    >= 19       19        ``YYYY-MM-DD HH:MM:SS`` (local)
    >= 10       10        ``YYYY-MM-DD`` (local)
    >= 8        8         ``HH:MM:SS`` on ``date.min`` (local)
    ==========  ========  ====================================

    Layouts without an offset are read in the process's local time zone,
    so the resulting instant depends on the ``TZ`` environment.
    """
    n = len(raw)
    if n >= 25:
        return _offset_datetime(raw[:25])
    if n >= 19:
        if "T" in raw:
            return _local(_match(_DATETIME_T_RE, raw[:19]))
        return _local(_match(_DATETIME_RE, raw[:19]))
    if n >= 10:
        y, m, d = _match(_DATE_RE, raw[:10])
        return _local((y, m, d, 0, 0, 0))
    if n >= 8:
        hh, mm, ss = _match(_TIME_RE, raw[:8])
        return _local((date.min.year, date.min.month, date.min.day, hh, mm, ss))
    return None


def _match(pattern: re.Pattern[str], text: str) -> tuple[int, ...]:
    m = pattern.fullmatch(text)
    if m is None:
        msg = f"does not match layout {pattern.pattern!r}"
        raise ValueError(msg)
    return tuple(int(g) for g in m.groups())


def _local(parts: tuple[int, ...]) -> datetime:
    """Build a wall-clock datetime and attach the local zone's offset."""
    naive = datetime(*parts)
    try:
        return naive.astimezone()
    except (OverflowError, ValueError):
        # Years at the edge of the datetime range cannot round-trip through UTC
        return naive.replace(tzinfo=datetime.now().astimezone().tzinfo)


def _offset_datetime(text: str) -> datetime:
    m = _OFFSET_DATETIME_RE.fullmatch(text)
    if m is None:
        msg = f"does not match layout {_OFFSET_DATETIME_RE.pattern!r}"
        raise ValueError(msg)
    y, mo, d, hh, mm, ss, frac, offset = m.groups()
    micro = int((frac or "0")[:6].ljust(6, "0"))
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        oh, om = int(offset[1:3]), int(offset[4:6])
        if oh > 23 or om > 59:
            msg = f"invalid offset {offset!r}"
            raise ValueError(msg)
        tz = timezone(sign * timedelta(hours=oh, minutes=om))
    return datetime(int(y), int(mo), int(d), int(hh), int(mm), int(ss), micro, tzinfo=tz)
