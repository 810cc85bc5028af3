"""World sink protocol - what the execution engine needs from the game."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class WorldSink(Protocol):
    """Mutable Minecraft world reachable from Python"""

    async def run_command(self, command: str) -> bool:
        """Run one command (without leading slash). False or an exception means failure."""
        ...

    async def set_block(self, block_id: str, x: int, y: int, z: int) -> bool:
        """Assign a block type at absolute coordinates. False or an exception means failure."""
        ...
