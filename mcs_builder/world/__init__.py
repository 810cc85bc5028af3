"""World sinks the execution engine applies operations to."""

from .base import WorldSink
from .block_registry import BlockRegistry
from .memory_world import InMemoryWorld
from .rcon_world import RconWorld

__all__ = ["WorldSink", "BlockRegistry", "InMemoryWorld", "RconWorld"]
