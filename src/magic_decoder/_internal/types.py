"""Shared type aliases used across magic_decoder modules."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from magic_decoder.http.request import Request

# Extractor: populates a destination from one aspect of a request
Extractor: TypeAlias = Callable[[Any, "Request"], None]
