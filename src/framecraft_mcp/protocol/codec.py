"""Field value codec: converts a single field's display value to and from bytes.

Every field falls into exactly one :class:`FieldKind`::

    +---------------+-------------------+---------------------------------------+
    | Kind          | Value string      | Canonical bytes                       |
    +---------------+-------------------+---------------------------------------+
    | FIXED_DEC     | decimal digits    | big-endian, ``length`` bytes, clamped |
    | FIXED_HEX     | hex digits        | big-endian, ``length`` bytes          |
    | FIXED_BIN     | ``0``/``1`` bits  | big-endian, ``length`` bytes          |
    | VARIABLE_TEXT | any text          | UTF-8                                 |
    | VARIABLE_HEX  | hex digits        | direct hex decode                     |
    +---------------+-------------------+---------------------------------------+

Fixed kinds share one fitting rule: the value is a big-endian integer, so
short values are zero-padded on the left and long values keep their
low-order bytes.

Nothing in this module raises on value content. Characters that do not
belong to a kind are filtered out, and conversions that cannot be performed
return their input unchanged.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ..models.field import ProtocolField

MIN_FIELD_LENGTH = 1
MAX_FIELD_LENGTH = 1024

_NON_DEC = re.compile(r"[^0-9]")
_NON_HEX = re.compile(r"[^0-9A-Fa-f]")
_NON_BIN = re.compile(r"[^01]")
_WHITESPACE = re.compile(r"\s")


class ValueFormat(str, Enum):
    """Display format of a fixed-length field."""

    DEC = "dec"
    HEX = "hex"
    BIN = "bin"


class ValueType(str, Enum):
    """Content type of a variable-length field."""

    TEXT = "text"
    HEX = "hex"


class FieldKind(Enum):
    """Closed set of field encodings."""

    FIXED_DEC = "fixed_dec"
    FIXED_HEX = "fixed_hex"
    FIXED_BIN = "fixed_bin"
    VARIABLE_TEXT = "variable_text"
    VARIABLE_HEX = "variable_hex"

    @property
    def is_variable(self) -> bool:
        return self in (FieldKind.VARIABLE_TEXT, FieldKind.VARIABLE_HEX)


FIXED_KINDS: dict[ValueFormat, FieldKind] = {
    ValueFormat.DEC: FieldKind.FIXED_DEC,
    ValueFormat.HEX: FieldKind.FIXED_HEX,
    ValueFormat.BIN: FieldKind.FIXED_BIN,
}

VARIABLE_KINDS: dict[ValueType, FieldKind] = {
    ValueType.TEXT: FieldKind.VARIABLE_TEXT,
    ValueType.HEX: FieldKind.VARIABLE_HEX,
}


def field_kind(field: ProtocolField) -> FieldKind:
    """Select the encoding of a field from its attributes."""
    if field.is_variable:
        return VARIABLE_KINDS[ValueType(field.value_type)]
    return FIXED_KINDS[ValueFormat(field.value_format)]


# ─── INPUT FILTERS ───────────────────────────────────────────────────

def filter_dec(raw: str) -> str:
    """Keep decimal digits only."""
    return _NON_DEC.sub("", raw)


def filter_hex(raw: str) -> str:
    """Keep hex digits only, uppercased."""
    return _NON_HEX.sub("", raw).upper()


def filter_bin(raw: str) -> str:
    """Keep ``0`` and ``1`` only."""
    return _NON_BIN.sub("", raw)


_FILTERS: dict[FieldKind, Callable[[str], str]] = {
    FieldKind.FIXED_DEC: filter_dec,
    FieldKind.FIXED_HEX: filter_hex,
    FieldKind.FIXED_BIN: filter_bin,
    FieldKind.VARIABLE_TEXT: lambda raw: raw,
    FieldKind.VARIABLE_HEX: filter_hex,
}


def filter_input(kind: FieldKind, raw: str) -> str:
    """Strip characters that are not allowed in a value of ``kind``."""
    return _FILTERS[kind](raw)


def clean_hex(value: str) -> str:
    """Canonicalize a hex string: drop non-hex characters, uppercase."""
    return filter_hex(value)


def format_hex_grouped(value: str) -> str:
    """Display form of a hex string: uppercase pairs separated by spaces.

    >>> format_hex_grouped("0a0b0c")
    '0A 0B 0C'
    """
    hex_str = clean_hex(value)
    return " ".join(hex_str[i : i + 2] for i in range(0, len(hex_str), 2))


# ─── ENCODERS ────────────────────────────────────────────────────────

def _max_value(length: int) -> int:
    return (1 << (8 * length)) - 1


def _encode_dec(value: str, length: int) -> bytes:
    digits = filter_dec(value)
    number = int(digits) if digits else 0
    number = min(number, _max_value(length))
    return number.to_bytes(length, "big")


def _encode_fixed_hex(value: str, length: int) -> bytes:
    width = length * 2
    hex_str = clean_hex(value).rjust(width, "0")[-width:]
    return bytes.fromhex(hex_str)


def _encode_bin(value: str, length: int) -> bytes:
    width = length * 8
    bits = filter_bin(value).rjust(width, "0")[-width:]
    return int(bits, 2).to_bytes(length, "big")


def _encode_text(value: str, length: int) -> bytes:
    return value.encode("utf-8")


def _encode_variable_hex(value: str, length: int) -> bytes:
    hex_str = clean_hex(value)
    # An unpaired trailing nibble is not a byte
    return bytes.fromhex(hex_str[: len(hex_str) - len(hex_str) % 2])


_ENCODERS: dict[FieldKind, Callable[[str, int], bytes]] = {
    FieldKind.FIXED_DEC: _encode_dec,
    FieldKind.FIXED_HEX: _encode_fixed_hex,
    FieldKind.FIXED_BIN: _encode_bin,
    FieldKind.VARIABLE_TEXT: _encode_text,
    FieldKind.VARIABLE_HEX: _encode_variable_hex,
}


def encode_value(kind: FieldKind, value: str, length: int = 0) -> bytes:
    """Encode a value string to its canonical bytes.

    Args:
        kind: Field encoding.
        value: Display value.
        length: Byte length for fixed kinds (1-1024). Ignored for
            variable kinds, whose length follows from the value.

    Returns:
        The canonical bytes. Fixed kinds always return exactly
        ``length`` bytes.
    """
    if not kind.is_variable and not MIN_FIELD_LENGTH <= length <= MAX_FIELD_LENGTH:
        raise ValueError(
            f"Fixed field length must be {MIN_FIELD_LENGTH}-{MAX_FIELD_LENGTH}, "
            f"got {length}"
        )
    return _ENCODERS[kind](value or "", length)


def encode_field(field: ProtocolField) -> bytes:
    """Canonical bytes of a field, sized to its effective length."""
    return encode_value(field_kind(field), field.value, field.length)


def derived_length(kind: FieldKind, value: str) -> int:
    """Byte length of a variable value's canonical encoding."""
    return len(_ENCODERS[kind](value or "", 0))


def effective_length(field: ProtocolField) -> int:
    """Number of bytes the field contributes to a frame when enabled."""
    kind = field_kind(field)
    if kind.is_variable:
        return derived_length(kind, field.value)
    return field.length


# ─── DECODERS ────────────────────────────────────────────────────────

def _decode_dec(data: bytes) -> str:
    return str(int.from_bytes(data, "big"))


def _decode_hex(data: bytes) -> str:
    return data.hex().upper()


def _decode_bin(data: bytes) -> str:
    if not data:
        return ""
    return format(int.from_bytes(data, "big"), f"0{len(data) * 8}b")


def _decode_text(data: bytes) -> str:
    return hex_to_text(_decode_hex(data))


_DECODERS: dict[FieldKind, Callable[[bytes], str]] = {
    FieldKind.FIXED_DEC: _decode_dec,
    FieldKind.FIXED_HEX: _decode_hex,
    FieldKind.FIXED_BIN: _decode_bin,
    FieldKind.VARIABLE_TEXT: _decode_text,
    FieldKind.VARIABLE_HEX: _decode_hex,
}


def decode_value(kind: FieldKind, data: bytes) -> str:
    """Render bytes as a display value of ``kind``.

    Text that is not valid UTF-8 falls back to the canonical hex of the
    bytes.
    """
    return _DECODERS[kind](bytes(data))


def decode_field(field: ProtocolField, data: bytes) -> str:
    """Render bytes as a display value for ``field``."""
    return decode_value(field_kind(field), data)


# ─── CONVERSIONS ─────────────────────────────────────────────────────

def text_to_hex(text: str) -> str:
    """Canonical hex of the UTF-8 encoding of ``text``."""
    return text.encode("utf-8").hex().upper()


def hex_to_text(value: str) -> str:
    """Decode a hex string as UTF-8 text.

    Whitespace between digits is allowed. The input is returned unchanged
    if it contains anything other than hex digits and whitespace, or if
    its bytes are not valid UTF-8.
    """
    hex_str = _WHITESPACE.sub("", value)
    if _NON_HEX.search(hex_str):
        return value
    hex_str = hex_str[: len(hex_str) - len(hex_str) % 2]
    try:
        return bytes.fromhex(hex_str).decode("utf-8")
    except UnicodeDecodeError:
        return value


def convert_value_format(
    value: str, length: int, source: ValueFormat, target: ValueFormat
) -> str:
    """Re-render a fixed field value in another format.

    ``dec``, ``hex`` and ``bin`` all describe the same integer, so the
    conversion is lossless for any value that fits in ``length`` bytes.
    An empty value stays empty.
    """
    source, target = ValueFormat(source), ValueFormat(target)
    if not filter_input(FIXED_KINDS[source], value or ""):
        return ""
    data = encode_value(FIXED_KINDS[source], value, length)
    return decode_value(FIXED_KINDS[target], data)


def convert_value_type(value: str, source: ValueType, target: ValueType) -> str:
    """Re-render a variable field value as text or hex."""
    source, target = ValueType(source), ValueType(target)
    if source == target:
        return value
    if target == ValueType.HEX:
        return text_to_hex(value)
    return hex_to_text(value)
