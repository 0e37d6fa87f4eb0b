"""JSON export/import of a single protocol definition.

The file holds the portable part of a protocol record (no id, no
timestamps)::

    {
      "name": "Modbus TCP",
      "description": "...",
      "fields": [{"name": ..., "length": ..., "value": ..., ...}, ...]
    }
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .field import ProtocolField, new_field_id
from .protocol import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^\w\- ]")


@dataclass
class ProtocolImport:
    """A protocol definition read from a file, ready for editing."""

    name: str
    description: str | None
    fields: tuple[ProtocolField, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }


def default_filename(protocol: Protocol) -> str:
    """``<name>.json`` with characters unsafe in file names replaced."""
    safe_name = _UNSAFE_FILENAME.sub("_", protocol.name).strip() or "protocol"
    return f"{safe_name}.json"


def export_protocol(protocol: Protocol, path: str | Path) -> Path:
    """Write a protocol definition to a JSON file.

    Field ids are not exported; they are assigned again on import.

    Args:
        protocol: The protocol to export.
        path: Output file, or a directory to write ``<name>.json`` into.

    Returns:
        The path written to.
    """
    path = Path(path)
    if path.is_dir():
        path = path / default_filename(protocol)

    fields = []
    for f in protocol.fields:
        item = f.to_dict()
        del item["id"]
        fields.append(item)

    export_data: dict[str, Any] = {"name": protocol.name, "fields": fields}
    if protocol.description is not None:
        export_data["description"] = protocol.description

    path.write_text(json.dumps(export_data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Exported protocol %r to %s", protocol.name, path)
    return path


def import_protocol(path: str | Path) -> ProtocolImport:
    """Read a protocol definition from a JSON file.

    Every imported field gets a fresh id.

    Raises:
        ValueError: If the file is not a valid protocol definition.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid protocol file {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("fields"), list):
        raise ValueError(f"Invalid protocol file {path}: missing 'fields' list")

    try:
        fields = tuple(
            ProtocolField.from_dict({**item, "id": new_field_id()})
            for item in data["fields"]
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid protocol file {path}: {e}") from e

    logger.info("Imported protocol %r (%d fields) from %s", data.get("name"), len(fields), path)
    return ProtocolImport(
        name=data.get("name", path.stem),
        description=data.get("description"),
        fields=fields,
    )
