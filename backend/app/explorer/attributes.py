"""
Deterministic per-item presentation attributes.

An event always gets the same card image and the same fallback gradient
without persisting the choice: the identifier is hashed and reduced
modulo the candidate list length. Editing a candidate list redistributes
every assignment.
"""
from typing import Optional, Sequence, TypeVar

from app.explorer.identifiers import document_id

T = TypeVar("T")

IMAGE_DIR = "images"

EVENT_IMAGES = [f"event{i}.png" for i in range(1, 21)]

GRADIENT_FALLBACKS = [
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
    "linear-gradient(135deg, #4facfe 0%, #00f2fe 100%)",
    "linear-gradient(135deg, #43e97b 0%, #38f9d7 100%)",
    "linear-gradient(135deg, #fa709a 0%, #fee140 100%)",
    "linear-gradient(135deg, #30cfd0 0%, #330867 100%)",
    "linear-gradient(135deg, #a8edea 0%, #fed6e3 100%)",
    "linear-gradient(135deg, #ff9a9e 0%, #fecfef 100%)",
    "linear-gradient(135deg, #ffecd2 0%, #fcb69f 100%)",
    "linear-gradient(135deg, #ff6e7f 0%, #bfe9ff 100%)",
]

_INT32 = 1 << 32


def _to_int32(value: int) -> int:
    value &= _INT32 - 1
    return value - _INT32 if value >= 1 << 31 else value


def hash_string(value: str) -> int:
    """
    32-bit polynomial rolling hash (``h = h * 31 + c``) over UTF-16 code
    units, folded to a signed 32-bit integer at every step, absolute value.

    Matches the hash the browser pages compute, so server-rendered and
    client-rendered cards agree.
    """
    encoded = value.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32(h * 31 + code_unit)
    return abs(h)


def assign(identifier: Optional[str], candidates: Sequence[T]) -> T:
    """Pick the candidate for an identifier; a missing identifier hashes as ''."""
    if not candidates:
        raise ValueError("candidates must not be empty")
    return candidates[hash_string(identifier or "") % len(candidates)]


def event_image(event: dict) -> str:
    return f"{IMAGE_DIR}/{assign(document_id(event), EVENT_IMAGES)}"


def fallback_gradient(event: dict) -> str:
    return assign(document_id(event), GRADIENT_FALLBACKS)


def index_gradient(index: int) -> str:
    """Gradient by display position, used by the homepage highlights."""
    return GRADIENT_FALLBACKS[index % len(GRADIENT_FALLBACKS)]
