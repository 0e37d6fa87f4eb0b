"""Data models for protocol fields, protocols, and presets."""

from .field import ProtocolField, new_field
from .protocol import Protocol, fields_for_editing
from .presets import PRESETS, ProtocolPreset, apply_preset, get_preset
