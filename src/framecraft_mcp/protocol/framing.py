"""Frame assembly: serialize an ordered field sequence into one byte buffer.

Frame layout::

    +-----------+-----------+-----+-----------+
    | Field 0   | Field 1   | ... | Field n-1 |
    | eff. len  | eff. len  |     | eff. len  |
    +-----------+-----------+-----+-----------+

- Fields appear in sequence order.
- A disabled field contributes no bytes at all.
- Each field is encoded on its own. Nothing is computed across fields, so
  a field called "Length" or "Checksum" holds whatever value it was given.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from .codec import effective_length, encode_field

if TYPE_CHECKING:
    from ..models.field import ProtocolField


@dataclass
class FieldSpan:
    """Where an enabled field sits inside an assembled frame."""

    field_id: str
    name: str
    offset: int
    length: int

    def __repr__(self) -> str:
        return (
            f"FieldSpan(name={self.name!r}, offset=0x{self.offset:04X}, "
            f"length={self.length})"
        )


def enabled_fields(fields: Iterable[ProtocolField]) -> list[ProtocolField]:
    return [f for f in fields if f.enabled]


def assemble(fields: Sequence[ProtocolField]) -> bytes:
    """Build the frame for a field sequence.

    Args:
        fields: Fields in serialization order.

    Returns:
        The concatenated canonical bytes of every enabled field.
    """
    return b"".join(encode_field(f) for f in enabled_fields(fields))


def assemble_hex(fields: Sequence[ProtocolField]) -> str:
    """Canonical hex form of :func:`assemble`."""
    return assemble(fields).hex().upper()


def frame_length(fields: Sequence[ProtocolField]) -> int:
    """Total frame size: the sum of the enabled fields' effective lengths."""
    return sum(effective_length(f) for f in enabled_fields(fields))


def frame_layout(fields: Sequence[ProtocolField]) -> list[FieldSpan]:
    """Offset and size of each enabled field in the assembled frame."""
    spans: list[FieldSpan] = []
    offset = 0
    for f in enabled_fields(fields):
        length = effective_length(f)
        spans.append(FieldSpan(field_id=f.id, name=f.name, offset=offset, length=length))
        offset += length
    return spans
