"""Protocol record: a named, ordered sequence of fields."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable

from .field import ProtocolField, with_new_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Protocol:
    """A saved protocol definition.

    Field order is serialization order. The record itself belongs to
    whatever store saved it; this class only maps it to and from its
    dict form.
    """

    id: str
    name: str
    description: str | None = None
    fields: tuple[ProtocolField, ...] = ()
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Protocol:
        now = _now()
        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            name=data.get("name", ""),
            description=data.get("description"),
            fields=fields_from_dicts(data.get("fields") or []),
            created_at=data.get("createdAt") or now,
            updated_at=data.get("updatedAt") or now,
        )

    def with_fields(self, fields: Iterable[ProtocolField]) -> Protocol:
        """Same protocol with a new field sequence and a fresh ``updated_at``."""
        return replace(self, fields=tuple(fields), updated_at=_now())

    def __repr__(self) -> str:
        return f"Protocol(name={self.name!r}, fields={len(self.fields)})"


def fields_from_dicts(items: Iterable[dict[str, Any]]) -> tuple[ProtocolField, ...]:
    return tuple(ProtocolField.from_dict(item) for item in items)


def fields_to_dicts(fields: Iterable[ProtocolField]) -> list[dict[str, Any]]:
    return [f.to_dict() for f in fields]


def fields_for_editing(protocol: Protocol) -> tuple[ProtocolField, ...]:
    """Copy a protocol's fields into an editing session.

    Every field gets a new id so that several sessions opened on the same
    protocol never share field identities.
    """
    return tuple(with_new_id(f) for f in protocol.fields)
