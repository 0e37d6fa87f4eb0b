"""MCP server entry point for framecraft.

Exposes the field codec, frame assembler, hex dump formatter and TCP
transport as tools and resources via the Model Context Protocol, using the
official Python MCP SDK with stdio transport.

Tools are stateless with respect to fields: every call takes the field
sequence as a list of field dicts and returns the new sequence.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.field import (
    ProtocolField,
    new_field as make_field,
    with_description,
    with_enabled,
    with_length,
    with_name,
    with_value,
    with_value_format,
    with_value_type,
    with_variable,
)
from .models.file_formats import export_protocol as write_protocol_file
from .models.file_formats import import_protocol as read_protocol_file
from .models.presets import PRESETS, apply_preset as instantiate_preset, get_preset
from .models.protocol import Protocol, fields_from_dicts, fields_to_dicts
from .models import sequence
from .protocol.codec import decode_field as decode_field_bytes
from .protocol.framing import assemble, frame_layout
from .protocol.hexdump import format_copy_hex, format_hex_dump, hex_to_bytes
from .protocol.parser import decode_response as decode_response_hex
from .transport.tcp_connection import DEFAULT_TIMEOUT_S, ConnectionManager

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "framecraft",
    instructions="Build binary protocol frames from typed fields, preview them "
    "as hex dumps, and send them over TCP",
)

# Global connection state
_connections = ConnectionManager()

FieldList = list[dict[str, Any]]


def _load(fields: FieldList) -> tuple[ProtocolField, ...]:
    return fields_from_dicts(fields)


def _frame_result(fields: tuple[ProtocolField, ...]) -> dict[str, Any]:
    """New field list plus the frame it assembles to."""
    frame = assemble(fields)
    return {
        "fields": fields_to_dicts(fields),
        "frame_hex": frame.hex().upper(),
        "frame_length": len(frame),
    }


def _as_bool(value: Any) -> bool:
    """Read a flag that may arrive as a string from a JSON client."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no", "off")
    return bool(value)


# ─── FIELD EDITING TOOLS ─────────────────────────────────────────────

@mcp.tool()
def new_field(
    name: str = "",
    length: int = 1,
    value_format: str = "dec",
    is_variable: bool = False,
    value_type: str = "text",
    value: str = "",
) -> dict[str, Any]:
    """Create a single field with a fresh id.

    Args:
        name: Field name.
        length: Byte length for fixed fields (1-1024).
        value_format: dec, hex or bin (fixed fields).
        is_variable: Whether the length follows from the value.
        value_type: text or hex (variable fields).
        value: Initial value; disallowed characters are dropped.
    """
    try:
        field = make_field(
            name,
            length=length,
            value_format=value_format,
            is_variable=is_variable,
            value_type=value_type,
        )
        field = with_value(field, value)
    except ValueError as e:
        return {"error": str(e)}
    return field.to_dict()


@mcp.tool()
def edit_field(fields: FieldList, field_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    """Apply attribute changes to one field.

    Changes are applied in a fixed order (isVariable, valueType,
    valueFormat, length, value, name, description, enabled) so that a value
    given together with a new format is read in the new format. Numeric
    strings, "true"/"false" flags and null text are accepted.

    Args:
        fields: Current field list.
        field_id: Id of the field to change.
        changes: Any of isVariable, valueType, valueFormat, length, value,
                 name, description, enabled.
    """
    steps = [
        ("isVariable", lambda f, v: with_variable(f, _as_bool(v))),
        ("valueType", with_value_type),
        ("valueFormat", with_value_format),
        ("length", lambda f, v: with_length(f, int(v))),
        ("value", lambda f, v: with_value(f, "" if v is None else str(v))),
        ("name", lambda f, v: with_name(f, "" if v is None else str(v))),
        ("description", lambda f, v: with_description(f, None if v is None else str(v))),
        ("enabled", lambda f, v: with_enabled(f, _as_bool(v))),
    ]
    unknown = set(changes) - {key for key, _ in steps}
    if unknown:
        return {"error": f"Unknown field attributes: {sorted(unknown)}"}

    def change(field: ProtocolField) -> ProtocolField:
        for key, apply in steps:
            if key in changes:
                field = apply(field, changes[key])
        return field

    try:
        updated = sequence.update_field(_load(fields), field_id, change)
    except (KeyError, ValueError, TypeError) as e:
        return {"error": str(e)}
    return _frame_result(updated)


@mcp.tool()
def add_field(fields: FieldList, field: dict[str, Any] | None = None) -> dict[str, Any]:
    """Append a field (a default one if none is given)."""
    try:
        updated = sequence.add_field(
            _load(fields), ProtocolField.from_dict(field) if field else None
        )
    except ValueError as e:
        return {"error": str(e)}
    return _frame_result(updated)


@mcp.tool()
def insert_field(
    fields: FieldList, index: int, field: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Insert a field right after position ``index`` (-1 for the front)."""
    try:
        updated = sequence.insert_after(
            _load(fields), index, ProtocolField.from_dict(field) if field else None
        )
    except (IndexError, ValueError) as e:
        return {"error": str(e)}
    return _frame_result(updated)


@mcp.tool()
def delete_field(fields: FieldList, index: int) -> dict[str, Any]:
    """Remove the field at ``index``."""
    try:
        updated = sequence.delete_field(_load(fields), index)
    except (IndexError, ValueError) as e:
        return {"error": str(e)}
    return _frame_result(updated)


@mcp.tool()
def move_field(fields: FieldList, index: int, direction: str) -> dict[str, Any]:
    """Move the field at ``index`` one position up or down.

    Args:
        fields: Current field list.
        index: Position of the field to move.
        direction: "up" or "down".
    """
    moves = {"up": sequence.move_up, "down": sequence.move_down}
    if direction not in moves:
        return {"error": f"Direction must be one of {list(moves)}"}
    try:
        updated = moves[direction](_load(fields), index)
    except (IndexError, ValueError) as e:
        return {"error": str(e)}
    return _frame_result(updated)


# ─── ENCODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def encode_field(field: dict[str, Any]) -> dict[str, Any]:
    """Encode one field to its canonical bytes (as hex)."""
    try:
        parsed = ProtocolField.from_dict(field)
    except ValueError as e:
        return {"error": str(e)}
    data = parsed.to_bytes()
    return {"hex": data.hex().upper(), "length": len(data)}


@mcp.tool()
def decode_field(field: dict[str, Any], data_hex: str) -> dict[str, Any]:
    """Render bytes as a display value for the given field's type.

    Args:
        field: The field whose type decides the rendering.
        data_hex: Bytes to render, as hex.
    """
    try:
        parsed = ProtocolField.from_dict(field)
        data = hex_to_bytes(data_hex)
    except ValueError as e:
        return {"error": str(e)}
    return {"value": decode_field_bytes(parsed, data)}


@mcp.tool()
def assemble_frame(fields: FieldList) -> dict[str, Any]:
    """Assemble a field list into one frame.

    Returns the canonical hex, total length, per-field layout and hex dump.
    """
    try:
        loaded = _load(fields)
    except ValueError as e:
        return {"error": str(e)}
    frame = assemble(loaded)
    return {
        "frame_hex": frame.hex().upper(),
        "frame_length": len(frame),
        "layout": [
            {"field_id": s.field_id, "name": s.name, "offset": s.offset, "length": s.length}
            for s in frame_layout(loaded)
        ],
        "dump": format_hex_dump(frame).to_dict(),
    }


@mcp.tool()
def hex_dump(data_hex: str) -> dict[str, Any]:
    """Render hex data as an offset/hex/ASCII dump."""
    try:
        data = hex_to_bytes(data_hex)
    except ValueError as e:
        return {"error": str(e)}
    return format_hex_dump(data).to_dict()


@mcp.tool()
def copy_hex(data_hex: str) -> dict[str, Any]:
    """Format hex data as space-separated byte pairs for copying."""
    try:
        data = hex_to_bytes(data_hex)
    except ValueError as e:
        return {"error": str(e)}
    if not data:
        return {"error": "Nothing to copy"}
    return {"text": format_copy_hex(data)}


@mcp.tool()
def decode_response(response_hex: str) -> dict[str, Any]:
    """Show a received hex buffer as UTF-8 text and as a hex dump."""
    return decode_response_hex(response_hex).to_dict()


# ─── PRESET & FILE TOOLS ─────────────────────────────────────────────

@mcp.tool()
def list_presets() -> dict[str, Any]:
    """List the built-in protocol presets."""
    return {"presets": [p.to_dict() for p in PRESETS]}


@mcp.tool()
def apply_preset(preset_id: str) -> dict[str, Any]:
    """Create a field list from a built-in preset.

    Args:
        preset_id: e.g. modbus_tcp, http_simple, custom_header, dubbo, triple.
    """
    try:
        preset = get_preset(preset_id)
    except KeyError as e:
        return {"error": str(e)}
    result = _frame_result(instantiate_preset(preset))
    result["name"] = preset.name
    return result


@mcp.tool()
def export_protocol(
    name: str, fields: FieldList, path: str, description: str | None = None
) -> dict[str, Any]:
    """Save a protocol definition to a JSON file.

    Args:
        name: Protocol name.
        fields: Field list.
        path: Output file, or a directory to write ``<name>.json`` into.
        description: Optional description.
    """
    try:
        protocol = Protocol.from_dict(
            {"name": name, "description": description, "fields": fields}
        )
        written = write_protocol_file(protocol, path)
    except (OSError, ValueError) as e:
        return {"error": str(e)}
    return {"exported": True, "path": str(written), "field_count": len(protocol.fields)}


@mcp.tool()
def import_protocol(path: str) -> dict[str, Any]:
    """Load a protocol definition from a JSON file."""
    try:
        imported = read_protocol_file(Path(path))
    except (OSError, ValueError) as e:
        return {"error": str(e)}
    result = _frame_result(imported.fields)
    result["name"] = imported.name
    result["description"] = imported.description
    return result


# ─── CONNECTION TOOLS ────────────────────────────────────────────────

@mcp.tool()
def connect(
    connection_id: str, host: str, port: int, timeout: float = DEFAULT_TIMEOUT_S
) -> dict[str, Any]:
    """Open a TCP connection.

    Args:
        connection_id: Name to refer to the connection by.
        host: Server host name or address.
        port: Server port.
        timeout: Connect/send/receive timeout in seconds.
    """
    try:
        info = _connections.connect(connection_id, host, port, timeout)
    except ConnectionError as e:
        return {"connected": False, "error": str(e)}
    return {"connected": True, "connection_id": connection_id, **info.to_dict()}


@mcp.tool()
def disconnect(connection_id: str) -> dict[str, bool]:
    """Close a TCP connection."""
    _connections.disconnect(connection_id)
    return {"disconnected": True}


@mcp.tool()
def send_frame(connection_id: str, fields: FieldList) -> dict[str, Any]:
    """Assemble a field list, send the frame, and decode the response."""
    try:
        frame_hex = assemble(_load(fields)).hex().upper()
    except ValueError as e:
        return {"error": str(e)}
    if not frame_hex:
        return {"error": "Frame is empty; add or enable fields first"}

    result = _connections.send(connection_id, frame_hex, mode="hex")
    out: dict[str, Any] = {"frame_hex": frame_hex, **result.to_dict()}
    if result.success:
        out["response"] = decode_response_hex(result.response_hex).to_dict()
    return out


@mcp.tool()
def send_raw(connection_id: str, data: str, mode: str = "hex") -> dict[str, Any]:
    """Send raw data without building a frame.

    Args:
        connection_id: An open connection.
        data: Payload, as hex or text depending on ``mode``.
        mode: "hex" or "text".
    """
    result = _connections.send(connection_id, data, mode=mode)
    out = result.to_dict()
    if result.success:
        out["response"] = decode_response_hex(result.response_hex).to_dict()
    return out


@mcp.tool()
def send_only(connection_id: str, data: str, mode: str = "hex") -> dict[str, Any]:
    """Send data without waiting for a response.

    Pair with ``receive_only`` for peers that answer late or in pieces.
    """
    return _connections.send_only(connection_id, data, mode=mode).to_dict()


@mcp.tool()
def receive_only(connection_id: str) -> dict[str, Any]:
    """Read one response chunk from an open connection."""
    result = _connections.receive_only(connection_id)
    out = result.to_dict()
    if result.success:
        out["response"] = decode_response_hex(result.response_hex).to_dict()
    return out


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("framecraft://presets/list")
def resource_presets_list() -> str:
    """Built-in presets with their full field lists."""
    presets = []
    for p in PRESETS:
        presets.append({**p.to_dict(), "fields": fields_to_dicts(instantiate_preset(p))})
    return json.dumps({"presets": presets})


@mcp.resource("framecraft://connections")
def resource_connections() -> str:
    """Open TCP connections."""
    connections = {
        cid: info.to_dict() for cid, info in _connections.list_connections().items()
    }
    return json.dumps({"connections": connections})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    try:
        mcp.run(transport="stdio")
    finally:
        _connections.disconnect_all()


if __name__ == "__main__":
    main()
