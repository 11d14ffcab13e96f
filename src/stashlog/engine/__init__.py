"""Buffering engine: level policy, pending buffer, renderer and flush logic."""

from stashlog.engine.buffer import PendingBuffer
from stashlog.engine.engine import BufferEngine
from stashlog.engine.policy import LevelPolicy
from stashlog.engine.render import Renderer, dump_structure, payload_to_text

__all__ = [
    "BufferEngine",
    "LevelPolicy",
    "PendingBuffer",
    "Renderer",
    "dump_structure",
    "payload_to_text",
]
