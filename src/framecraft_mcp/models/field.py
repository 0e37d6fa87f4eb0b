"""Protocol field model.

A :class:`ProtocolField` is immutable. Every edit goes through one of the
``with_*`` functions, which return a new field and perform the value
conversion the edit implies.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Any

from ..protocol.codec import (
    MAX_FIELD_LENGTH,
    MIN_FIELD_LENGTH,
    FieldKind,
    ValueFormat,
    ValueType,
    convert_value_format,
    convert_value_type,
    derived_length,
    encode_field,
    field_kind,
    filter_input,
)


def new_field_id() -> str:
    """Generate an opaque unique field id."""
    return f"field_{uuid.uuid4().hex[:16]}"


@dataclass(frozen=True)
class ProtocolField:
    """One field of a protocol frame.

    For fixed fields ``length`` is the configured byte count. For variable
    fields it is always derived from ``value`` and any supplied length is
    replaced.
    """

    id: str
    name: str
    length: int = 1
    is_variable: bool = False
    value_type: ValueType = ValueType.HEX
    value_format: ValueFormat = ValueFormat.DEC
    enabled: bool = True
    value: str = ""
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value_type", ValueType(self.value_type))
        object.__setattr__(self, "value_format", ValueFormat(self.value_format))
        if self.is_variable:
            length = derived_length(field_kind(self), self.value)
            object.__setattr__(self, "length", length)
        elif not MIN_FIELD_LENGTH <= self.length <= MAX_FIELD_LENGTH:
            raise ValueError(
                f"Field '{self.name}' length must be "
                f"{MIN_FIELD_LENGTH}-{MAX_FIELD_LENGTH}, got {self.length}"
            )

    @property
    def kind(self) -> FieldKind:
        return field_kind(self)

    def to_bytes(self) -> bytes:
        """Canonical bytes of this field."""
        return encode_field(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase record form used by stored protocols."""
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "length": self.length,
            "isVariable": self.is_variable,
            "valueType": self.value_type.value,
            "valueFormat": self.value_format.value,
            "enabled": self.enabled,
            "value": self.value,
        }
        if self.description is not None:
            d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProtocolField:
        """Build a field from its record form. Missing keys take defaults."""
        return cls(
            id=data.get("id") or new_field_id(),
            name=data.get("name", ""),
            length=int(data.get("length") or MIN_FIELD_LENGTH),
            is_variable=bool(data.get("isVariable", False)),
            value_type=data.get("valueType") or ValueType.HEX,
            value_format=data.get("valueFormat") or ValueFormat.DEC,
            enabled=bool(data.get("enabled", True)),
            value=str(data.get("value") or ""),
            description=data.get("description"),
        )

    def __repr__(self) -> str:
        return (
            f"ProtocolField(name={self.name!r}, kind={self.kind.value}, "
            f"length={self.length}, value={self.value!r}"
            f"{'' if self.enabled else ', disabled'})"
        )


def new_field(name: str = "", **attrs: Any) -> ProtocolField:
    """Create a field with default attributes and a fresh id."""
    return ProtocolField(id=new_field_id(), name=name, **attrs)


def with_value(field: ProtocolField, raw: str) -> ProtocolField:
    """Set a new value, dropping characters the field's kind does not allow."""
    return replace(field, value=filter_input(field.kind, raw))


def with_length(field: ProtocolField, length: int) -> ProtocolField:
    """Resize a fixed field.

    Hex and binary values are re-rendered to the new width, keeping the
    low-order bytes when shrinking. Decimal values are kept as typed and
    clamp on encode.
    """
    if field.is_variable:
        raise ValueError(f"Field '{field.name}' is variable; its length is derived")
    if not MIN_FIELD_LENGTH <= length <= MAX_FIELD_LENGTH:
        raise ValueError(
            f"Field length must be {MIN_FIELD_LENGTH}-{MAX_FIELD_LENGTH}, got {length}"
        )
    value = field.value
    if field.value_format != ValueFormat.DEC and value:
        value = convert_value_format(
            value, length, field.value_format, field.value_format
        )
    return replace(field, length=length, value=value)


def with_value_format(field: ProtocolField, value_format: ValueFormat) -> ProtocolField:
    """Switch a fixed field between dec, hex and bin display."""
    value_format = ValueFormat(value_format)
    if field.is_variable:
        return replace(field, value_format=value_format)
    value = convert_value_format(
        field.value, field.length, field.value_format, value_format
    )
    return replace(field, value_format=value_format, value=value)


def with_value_type(field: ProtocolField, value_type: ValueType) -> ProtocolField:
    """Switch a variable field between text and hex content."""
    value_type = ValueType(value_type)
    if not field.is_variable:
        return replace(field, value_type=value_type)
    value = convert_value_type(field.value, field.value_type, value_type)
    if value_type == ValueType.HEX:
        value = filter_input(FieldKind.VARIABLE_HEX, value)
    return replace(field, value_type=value_type, value=value)


def with_variable(field: ProtocolField, is_variable: bool) -> ProtocolField:
    """Toggle between fixed and variable length, keeping the field's bytes.

    A fixed field becomes a variable hex field holding its current bytes.
    A variable field becomes a fixed hex field as long as its current
    content (at least one byte, at most the maximum field length). Text
    longer than the maximum keeps its leading bytes; hex keeps its
    low-order bytes like any fixed hex truncation.
    """
    if is_variable == field.is_variable:
        return field
    data = field.to_bytes()
    if field.value_type == ValueType.TEXT:
        data = data[:MAX_FIELD_LENGTH]
    if is_variable:
        return replace(
            field,
            is_variable=True,
            value_type=ValueType.HEX,
            value=data.hex().upper(),
        )
    length = min(max(len(data), MIN_FIELD_LENGTH), MAX_FIELD_LENGTH)
    return replace(
        field,
        is_variable=False,
        value_format=ValueFormat.HEX,
        length=length,
        value=convert_value_format(
            data.hex().upper() or "00", length, ValueFormat.HEX, ValueFormat.HEX
        ),
    )


def with_enabled(field: ProtocolField, enabled: bool) -> ProtocolField:
    return replace(field, enabled=enabled)


def with_name(field: ProtocolField, name: str) -> ProtocolField:
    return replace(field, name=name)


def with_description(field: ProtocolField, description: str | None) -> ProtocolField:
    return replace(field, description=description)


def with_new_id(field: ProtocolField) -> ProtocolField:
    """Same field under a fresh identity."""
    return replace(field, id=new_field_id())
