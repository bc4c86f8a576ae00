"""
Identifier normalization.

Events, periods and sub-periods reach the explorer from endpoints and
export files that serialize identifiers differently: a plain string, a
MongoDB Extended-JSON wrapper ``{"$oid": "..."}``, or a whole document
whose ``_id`` is itself either of those. Every cross-reference comparison
goes through `normalize_id` on both sides.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class UnsupportedIdentifier(ValueError):
    """Raised for identifier shapes outside the accepted set."""


@dataclass(frozen=True)
class PlainId:
    value: str

    def canonical(self) -> str:
        return self.value


@dataclass(frozen=True)
class WrappedId:
    oid: str

    def canonical(self) -> str:
        return self.oid


@dataclass(frozen=True)
class NestedId:
    """A document (or reference) carrying its identifier under ``_id``."""
    inner: Union[PlainId, WrappedId]

    def canonical(self) -> str:
        return self.inner.canonical()


IdentifierRef = Union[PlainId, WrappedId, NestedId]


def _parse_flat(value: Any) -> Optional[Union[PlainId, WrappedId]]:
    if isinstance(value, str):
        return PlainId(value) if value else None
    if isinstance(value, dict) and "$oid" in value:
        oid = value["$oid"]
        if isinstance(oid, str) and oid:
            return WrappedId(oid)
    raise UnsupportedIdentifier(f"Unsupported identifier shape: {value!r}")


def parse_identifier(value: Any) -> Optional[IdentifierRef]:
    """
    Parse a raw identifier into one of the accepted variants.

    Returns None for a missing identifier (None or empty string) and raises
    UnsupportedIdentifier for anything else outside the closed set.
    """
    if value is None or value == "":
        return None
    if isinstance(value, dict) and "_id" in value and "$oid" not in value:
        inner = _parse_flat(value["_id"])
        return NestedId(inner) if inner is not None else None
    return _parse_flat(value)


def normalize_id(value: Any) -> Optional[str]:
    """Canonical string form of an identifier, or None. Never raises."""
    try:
        parsed = parse_identifier(value)
    except UnsupportedIdentifier:
        logger.warning("Rejected identifier of unsupported shape: %r", value)
        return None
    return parsed.canonical() if parsed is not None else None


def same_id(left: Any, right: Any) -> bool:
    """Equality of normalized identifiers; missing never equals missing."""
    left_id = normalize_id(left)
    return left_id is not None and left_id == normalize_id(right)


def document_id(document: Optional[dict]) -> Optional[str]:
    """Normalized ``_id`` of a document, falling back to ``id``."""
    if not document:
        return None
    if "_id" in document:
        return normalize_id(document["_id"])
    return normalize_id(document.get("id"))
