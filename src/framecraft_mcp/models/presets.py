"""Built-in protocol presets.

A preset is a field template. Applying it copies its fields into an
editing session, each with a fresh id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .field import ProtocolField, new_field_id


@dataclass
class ProtocolPreset:
    """A named field template."""

    id: str
    name: str
    description: str = ""
    fields: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "field_count": len(self.fields),
        }


def _dec(name: str, length: int, value: str, description: str) -> dict[str, Any]:
    return {
        "name": name,
        "length": length,
        "value": value,
        "valueFormat": "dec",
        "description": description,
    }


def _var(name: str, value_type: str, value: str, description: str) -> dict[str, Any]:
    return {
        "name": name,
        "isVariable": True,
        "valueType": value_type,
        "value": value,
        "description": description,
    }


PRESETS: list[ProtocolPreset] = [
    ProtocolPreset(
        id="modbus_tcp",
        name="Modbus TCP",
        description="Modbus TCP protocol frame format",
        fields=[
            _dec("Transaction ID", 2, "1", "Transaction identifier"),
            _dec("Protocol ID", 2, "0", "Protocol identifier (0 = Modbus)"),
            _dec("Length", 2, "6", "Number of following bytes"),
            _dec("Unit ID", 1, "1", "Slave address"),
            _dec("Function Code", 1, "3", "Function code (0x03 = Read Holding Registers)"),
            _dec("Data", 4, "1", "Request data"),
        ],
    ),
    ProtocolPreset(
        id="http_simple",
        name="Simple HTTP",
        description="Simple HTTP GET request",
        fields=[
            _var("Method", "text", "GET", "HTTP method"),
            _dec("Space", 1, "32", "Space character (ASCII 32)"),
            _var("Path", "text", "/index.html", "Request path"),
            _dec("Space", 1, "32", "Space character (ASCII 32)"),
            _var("Version", "text", "HTTP/1.1", "HTTP version"),
            _dec("CRLF", 2, "3338", "Carriage return + line feed (0x0D0A)"),
        ],
    ),
    ProtocolPreset(
        id="custom_header",
        name="Custom Header",
        description="Custom protocol header with magic number",
        fields=[
            _dec("Magic Number", 4, "2864434397", "Protocol magic number (0xAABBCCDD)"),
            _dec("Version", 2, "256", "Protocol version (0x0100)"),
            _dec("Message Type", 1, "1", "Message type"),
            _dec("Sequence", 4, "1", "Sequence number"),
            _dec("Payload Length", 4, "16", "Payload length (16 bytes)"),
        ],
    ),
    ProtocolPreset(
        id="dubbo",
        name="Dubbo",
        description="Dubbo2 protocol frame format (16 byte header)",
        fields=[
            _dec("Magic High", 1, "218", "Magic high byte (0xDA)"),
            _dec("Magic Low", 1, "187", "Magic low byte (0xBB)"),
            _dec("Flag/Serialization", 1, "82", "Serialization type + flags (Req/Res=1, TwoWay=1, Hessian=2)"),
            _dec("Status", 1, "20", "Response status (OK=20)"),
            _dec("Request ID (High)", 4, "0", "Request ID high 4 bytes"),
            _dec("Request ID (Low)", 4, "1", "Request ID low 4 bytes"),
            _dec("Data Length", 4, "0", "Body length in bytes"),
        ],
    ),
    ProtocolPreset(
        id="triple",
        name="Triple",
        description="Triple protocol frame format (HTTP/2 based)",
        fields=[
            _dec("Frame Length (High)", 1, "0", "Frame length byte 2"),
            _dec("Frame Length (Low)", 2, "0", "Frame length bytes 0-1"),
            _dec("Frame Type", 1, "0", "Frame type (DATA=0, HEADERS=1, CONTINUATION=3)"),
            _dec("Flags", 1, "1", "Frame flags (END_STREAM=1, END_HEADERS=4)"),
            _dec("Stream ID", 4, "1", "Stream identifier"),
            _var("Payload", "hex", "", "Frame payload data"),
        ],
    ),
]

PRESETS_BY_ID: dict[str, ProtocolPreset] = {p.id: p for p in PRESETS}


def get_preset(preset_id: str) -> ProtocolPreset:
    """Look up a preset by id.

    Raises:
        KeyError: If the preset does not exist.
    """
    if preset_id not in PRESETS_BY_ID:
        raise KeyError(f"Unknown preset '{preset_id}'. Valid: {list(PRESETS_BY_ID)}")
    return PRESETS_BY_ID[preset_id]


def apply_preset(preset: ProtocolPreset) -> tuple[ProtocolField, ...]:
    """Instantiate a preset's fields for editing."""
    return tuple(
        ProtocolField.from_dict({**template, "id": new_field_id()})
        for template in preset.fields
    )
