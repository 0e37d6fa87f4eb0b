"""Editing operations over an ordered field sequence.

All functions are pure: they take a sequence, validate their arguments,
and return a new tuple. The input is never modified, so an operation that
raises leaves nothing half-done.
"""

from __future__ import annotations

from typing import Callable, Sequence

from .field import ProtocolField, new_field, with_enabled

Fields = tuple[ProtocolField, ...]


def _check_index(fields: Sequence[ProtocolField], index: int) -> None:
    if not 0 <= index < len(fields):
        raise IndexError(f"Field index must be 0-{len(fields) - 1}, got {index}")


def find_index(fields: Sequence[ProtocolField], field_id: str) -> int:
    """Position of the field with ``field_id``.

    Raises:
        KeyError: If no field has that id.
    """
    for i, f in enumerate(fields):
        if f.id == field_id:
            return i
    raise KeyError(f"No field with id '{field_id}'")


def add_field(
    fields: Sequence[ProtocolField], field: ProtocolField | None = None
) -> Fields:
    """Append ``field`` (or a default field named ``Field <n>``)."""
    if field is None:
        field = new_field(f"Field {len(fields) + 1}")
    return (*fields, field)


def insert_after(
    fields: Sequence[ProtocolField],
    index: int,
    field: ProtocolField | None = None,
) -> Fields:
    """Insert ``field`` right after position ``index``.

    ``index=-1`` inserts at the front.
    """
    if index != -1:
        _check_index(fields, index)
    if field is None:
        field = new_field(f"Field {len(fields) + 1}")
    return (*fields[: index + 1], field, *fields[index + 1 :])


def delete_field(fields: Sequence[ProtocolField], index: int) -> Fields:
    _check_index(fields, index)
    return (*fields[:index], *fields[index + 1 :])


def move_field(fields: Sequence[ProtocolField], index: int, new_index: int) -> Fields:
    """Move the field at ``index`` to ``new_index``; all others keep their order."""
    _check_index(fields, index)
    _check_index(fields, new_index)
    items = list(fields)
    items.insert(new_index, items.pop(index))
    return tuple(items)


def move_up(fields: Sequence[ProtocolField], index: int) -> Fields:
    """Swap a field with its predecessor. The first field stays put."""
    _check_index(fields, index)
    if index == 0:
        return tuple(fields)
    return move_field(fields, index, index - 1)


def move_down(fields: Sequence[ProtocolField], index: int) -> Fields:
    """Swap a field with its successor. The last field stays put."""
    _check_index(fields, index)
    if index == len(fields) - 1:
        return tuple(fields)
    return move_field(fields, index, index + 1)


def replace_field(
    fields: Sequence[ProtocolField], index: int, field: ProtocolField
) -> Fields:
    """Swap in a whole new field object at ``index``."""
    _check_index(fields, index)
    return (*fields[:index], field, *fields[index + 1 :])


def update_field(
    fields: Sequence[ProtocolField],
    field_id: str,
    change: Callable[[ProtocolField], ProtocolField],
) -> Fields:
    """Replace the field with ``field_id`` by ``change(field)``."""
    index = find_index(fields, field_id)
    return replace_field(fields, index, change(fields[index]))


def set_enabled(fields: Sequence[ProtocolField], index: int, enabled: bool) -> Fields:
    _check_index(fields, index)
    return replace_field(fields, index, with_enabled(fields[index], enabled))
