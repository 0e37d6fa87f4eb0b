"""Tests for protocol JSON export/import."""

import json
import tempfile
from pathlib import Path

from framecraft_mcp.models.field import new_field
from framecraft_mcp.models.file_formats import (
    default_filename,
    export_protocol,
    import_protocol,
)
from framecraft_mcp.models.protocol import Protocol
from framecraft_mcp.protocol.codec import ValueType
from framecraft_mcp.protocol.framing import assemble


def _protocol(name="Demo/v1"):
    return Protocol(
        id="p1",
        name=name,
        description="test",
        fields=[
            new_field("Type", value="3"),
            new_field("Body", is_variable=True, value_type=ValueType.TEXT, value="hi"),
        ],
    )


def test_export_import_roundtrip():
    protocol = _protocol()
    with tempfile.TemporaryDirectory() as tmp:
        path = export_protocol(protocol, Path(tmp) / "demo.json")
        imported = import_protocol(path)
    assert imported.name == "Demo/v1"
    assert imported.description == "test"
    assert assemble(imported.fields) == assemble(protocol.fields)


def test_export_omits_ids():
    with tempfile.TemporaryDirectory() as tmp:
        path = export_protocol(_protocol(), Path(tmp) / "demo.json")
        data = json.loads(path.read_text(encoding="utf-8"))
    assert "id" not in data
    assert all("id" not in f for f in data["fields"])


def test_import_assigns_fresh_ids():
    protocol = _protocol()
    with tempfile.TemporaryDirectory() as tmp:
        path = export_protocol(protocol, Path(tmp) / "demo.json")
        first = import_protocol(path)
        second = import_protocol(path)
    ids = {f.id for f in first.fields} | {f.id for f in second.fields}
    assert len(ids) == 4


def test_export_to_directory():
    with tempfile.TemporaryDirectory() as tmp:
        path = export_protocol(_protocol(), tmp)
        assert path.parent == Path(tmp)
        assert path.name == "Demo_v1.json"
        assert path.exists()


def test_default_filename_fallback():
    assert default_filename(_protocol(name="???")) == "___.json"
    assert default_filename(_protocol(name="")) == "protocol.json"


def test_import_invalid_json():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        try:
            import_protocol(path)
            assert False, "Should have raised ValueError"
        except ValueError as e:
            assert "bad.json" in str(e)


def test_import_missing_fields():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "empty.json"
        path.write_text('{"name": "x"}', encoding="utf-8")
        try:
            import_protocol(path)
            assert False, "Should have raised ValueError"
        except ValueError:
            pass


def test_import_bad_field_length():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "big.json"
        path.write_text(
            '{"name": "x", "fields": [{"name": "f", "length": 5000}]}', encoding="utf-8"
        )
        try:
            import_protocol(path)
            assert False, "Should have raised ValueError"
        except ValueError:
            pass
