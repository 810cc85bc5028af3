"""Claude Messages API client and request strategies."""

from .claude_client import ClaudeClient
from .strategies import BlockPlacementStrategy, BuildStrategy, TextCommandStrategy, get_strategy

__all__ = ["ClaudeClient", "BuildStrategy", "TextCommandStrategy", "BlockPlacementStrategy", "get_strategy"]
