"""
RCON world - sends commands to a live Minecraft server over RCON
"""

import asyncio
from typing import Optional

from mcrcon import MCRcon

from ..errors import OperationError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Server replies that mean the command did nothing
FAILURE_MARKERS = (
    "Unknown command",
    "Unknown or incomplete command",
    "Usage:",
    "Incorrect argument",
    "Could not",
    "Expected",
    "Invalid",
    "No blocks were",
)


class RconWorld:
    """World sink backed by a single RCON connection

    mcrcon enforces its timeout with SIGALRM, so every command runs on the
    event loop thread and blocks it until the server replies (up to `timeout`
    seconds). Concurrent builds are therefore serialized over the connection.
    """

    def __init__(self, host: str = "localhost", password: str = "", port: int = 25575, timeout: int = 5):
        self.host = host
        self.port = port
        self._password = password
        self._timeout = timeout
        self._client: Optional[MCRcon] = None
        # One request at a time on the shared connection
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        if self._client is not None:
            return
        logger.info("Connecting to RCON", host=self.host, port=self.port)
        client = MCRcon(self.host, self._password, port=self.port, timeout=self._timeout)
        client.connect()
        self._client = client
        logger.info("RCON connected")

    def close(self) -> None:
        if self._client is not None:
            self._client.disconnect()
            self._client = None
            logger.info("RCON connection closed")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @staticmethod
    def is_failure(output: str) -> bool:
        return any(marker in output for marker in FAILURE_MARKERS)

    async def run_command(self, command: str) -> bool:
        if self._client is None:
            raise OperationError("RCON is not connected")

        # mcrcon times out with SIGALRM, so calls stay on the event loop thread
        async with self._lock:
            output = self._client.command(command)

        if output and self.is_failure(output):
            logger.warning("Server rejected command", command=command, output=output)
            return False
        return True

    async def set_block(self, block_id: str, x: int, y: int, z: int) -> bool:
        return await self.run_command(f"setblock {x} {y} {z} {block_id}")
