"""Protocol layer: field codec, frame assembly, hex dumps, and response decoding."""

from .codec import FieldKind, ValueFormat, ValueType, encode_field, decode_field
from .framing import assemble, assemble_hex, frame_layout
from .hexdump import HexDump, format_hex_dump, format_copy_hex
from .parser import DecodedResponse, decode_response
