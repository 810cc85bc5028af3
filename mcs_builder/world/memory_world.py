"""
In-memory world - records commands instead of touching a server (dry runs and tests)
"""

from typing import Dict, List, Optional, Set, Tuple

from ..logging_config import get_logger

logger = get_logger(__name__)

KNOWN_COMMANDS = {
    "clone",
    "execute",
    "fill",
    "gamerule",
    "give",
    "kill",
    "particle",
    "say",
    "setblock",
    "summon",
    "tell",
    "time",
    "tp",
    "weather",
}


class InMemoryWorld:
    """World sink that keeps an ordered log of everything applied to it"""

    def __init__(self, known_commands: Optional[Set[str]] = None):
        self.known_commands = known_commands or KNOWN_COMMANDS
        self.commands: List[str] = []
        self.rejected: List[str] = []
        self.blocks: Dict[Tuple[int, int, int], str] = {}

    async def run_command(self, command: str) -> bool:
        verb = command.split(" ", 1)[0].lower()
        if verb not in self.known_commands:
            logger.debug("Unknown command", command=command)
            self.rejected.append(command)
            return False

        self.commands.append(command)
        if verb == "setblock":
            self._record_setblock(command)
        return True

    async def set_block(self, block_id: str, x: int, y: int, z: int) -> bool:
        self.blocks[(x, y, z)] = block_id
        self.commands.append(f"setblock {x} {y} {z} {block_id}")
        return True

    def _record_setblock(self, command: str) -> None:
        # Only absolute coordinates can be tracked without a player position
        parts = command.split()
        if len(parts) < 5:
            return
        try:
            x, y, z = (int(value) for value in parts[1:4])
        except ValueError:
            return
        self.blocks[(x, y, z)] = parts[4]

    def block_at(self, x: int, y: int, z: int) -> Optional[str]:
        return self.blocks.get((x, y, z))
