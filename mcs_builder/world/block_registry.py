"""
Block registry - resolves block ids against minecraft-data
"""

import logging
import re
from typing import Any, Dict, List, Optional

import minecraft_data

logger = logging.getLogger(__name__)

NAMESPACE = "minecraft:"
BLOCK_ID_PATTERN = re.compile(r"^(?:(?P<namespace>[a-z0-9_.\-]+):)?(?P<name>[a-z0-9_/.\-]+)(?P<state>\[.*\])?$")


class BlockRegistry:
    """Lookup of valid block types for one Minecraft version"""

    _instance = None
    _version = None

    def __new__(cls, mc_version: str = "1.21.1"):
        if cls._instance is None or cls._version != mc_version:
            cls._instance = super().__new__(cls)
            cls._version = mc_version
        return cls._instance

    def __init__(self, mc_version: str = "1.21.1"):
        """Initialize the registry for a Minecraft version

        Args:
            mc_version: Minecraft version string (e.g., "1.21.1")
        """
        # Only initialize if not already initialized or version changed
        if not hasattr(self, "mc_data") or self.version != mc_version:
            try:
                self.mc_data = minecraft_data(mc_version)
                self.version = mc_version
                logger.info(f"Initialized BlockRegistry for version {mc_version}")
            except Exception as e:
                logger.error(f"Failed to initialize minecraft-data for version {mc_version}: {e}")
                raise

    def get_block_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Get block data by name

        Args:
            name: Block name without namespace (e.g., "stone", "oak_log")

        Returns:
            Block data dict or None if not found
        """
        return self.mc_data.blocks_name.get(name)

    def resolve(self, block_id: str) -> Optional[str]:
        """Canonical namespaced id for a block, or None if the block does not exist

        Accepts "stone", "minecraft:stone" and ids with block states such as
        "minecraft:oak_stairs[facing=north]".
        """
        match = BLOCK_ID_PATTERN.match(block_id.strip().lower())
        if not match:
            return None

        namespace = match.group("namespace")
        if namespace not in (None, "minecraft"):
            return None

        name = match.group("name")
        if self.get_block_by_name(name) is None:
            return None
        return NAMESPACE + name + (match.group("state") or "")

    def find_blocks(self, name_pattern: str) -> List[Dict[str, Any]]:
        """Blocks whose name contains a pattern"""
        pattern = name_pattern.lower()
        return [data for name, data in self.mc_data.blocks_name.items() if pattern in name.lower()]

    def suggest(self, block_id: str, limit: int = 3) -> List[str]:
        """Names of known blocks resembling an unknown block id"""
        name = block_id.strip().lower().split("[", 1)[0].split(":")[-1]
        matches = self.find_blocks(name)
        if not matches and "_" in name:
            matches = self.find_blocks(name.rsplit("_", 1)[-1])
        return [block["name"] for block in matches[:limit]]
