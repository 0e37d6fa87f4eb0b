"""Response decoding: turn received bytes into text and hex dump views."""

from __future__ import annotations

from dataclasses import dataclass

from .hexdump import HexDump, format_hex_dump, hex_to_bytes


@dataclass
class DecodedResponse:
    """Both views of one received buffer."""

    raw: bytes
    text: str
    dump: HexDump

    @property
    def hex(self) -> str:
        return self.raw.hex().upper()

    def to_dict(self) -> dict:
        return {
            "hex": self.hex,
            "text": self.text,
            "length": len(self.raw),
            "dump": self.dump.to_dict(),
        }

    def __repr__(self) -> str:
        return f"DecodedResponse(length={len(self.raw)}, text={self.text[:32]!r})"


def decode_payload(data: bytes) -> DecodedResponse:
    """Decode raw bytes.

    Invalid UTF-8 sequences become U+FFFD replacement characters.
    """
    data = bytes(data)
    return DecodedResponse(
        raw=data,
        text=data.decode("utf-8", errors="replace"),
        dump=format_hex_dump(data),
    )


def decode_response(response_hex: str) -> DecodedResponse:
    """Decode a hex-encoded response as delivered by the transport.

    Whitespace between hex pairs is accepted. A string that is not hex at
    all produces an empty buffer and is shown unchanged as the text view.
    """
    try:
        data = hex_to_bytes(response_hex)
    except ValueError:
        return DecodedResponse(raw=b"", text=response_hex, dump=format_hex_dump(b""))
    return decode_payload(data)
