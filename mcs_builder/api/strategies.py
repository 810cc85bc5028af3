"""
Request strategies - the two interchangeable tool schemas Claude can answer with
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from .prompt import BLOCK_PLACEMENT_GUIDE, MCS_STYLE_GUIDE, SYSTEM_PROMPT

HAS_MORE_PROPERTY = {
    "type": "boolean",
    "description": "True when the structure is not finished and more sections will follow in another reply",
}


class BuildStrategy(ABC):
    """Builds the request body for one style of tool-based reply"""

    mode: str
    tool_name: str

    @abstractmethod
    def tool_schema(self) -> Dict[str, Any]:
        """Tool declaration sent in the `tools` array"""

    @abstractmethod
    def guide(self) -> str:
        """Instructions embedded ahead of the user's prompt"""

    def build_user_message(self, prompt: str, include_guide: bool = True) -> str:
        if include_guide:
            return self.guide() + prompt
        return prompt

    def build_request_body(
        self, prompt: str, model: str, max_tokens: int, include_guide: bool = True
    ) -> Dict[str, Any]:
        """Assemble the JSON body for the messages endpoint

        Args:
            prompt: Prompt text (already carrying player context)
            model: Claude model identifier
            max_tokens: Maximum tokens in the reply
            include_guide: Whether to embed the style guide (first round only)

        Returns:
            Request body dictionary
        """
        return {
            "model": model,
            "max_tokens": max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [
                {"role": "user", "content": self.build_user_message(prompt, include_guide)},
            ],
            "tools": [self.tool_schema()],
        }


class TextCommandStrategy(BuildStrategy):
    """Claude returns newline-separated commands in a single string"""

    mode = "text"
    tool_name = "generate_mcs"

    def tool_schema(self) -> Dict[str, Any]:
        return {
            "name": self.tool_name,
            "description": "Generate Minecraft Command Syntax (MCS) for building structures",
            "input_schema": {
                "type": "object",
                "properties": {
                    "commands": {
                        "type": "string",
                        "description": (
                            "A string containing multiple Minecraft commands (one per line) to build the "
                            "structure. Can include /fill, /setblock, /clone, etc."
                        ),
                    },
                    "has_more": HAS_MORE_PROPERTY,
                },
                "required": ["commands"],
            },
        }

    def guide(self) -> str:
        return MCS_STYLE_GUIDE


class BlockPlacementStrategy(BuildStrategy):
    """Claude returns an array of individual block placements"""

    mode = "blocks"
    tool_name = "place_blocks"

    def tool_schema(self) -> Dict[str, Any]:
        return {
            "name": self.tool_name,
            "description": "Place blocks in the Minecraft world to build a structure",
            "input_schema": {
                "type": "object",
                "properties": {
                    "blocks": {
                        "type": "array",
                        "description": "Blocks to place, in build order",
                        "items": {
                            "type": "object",
                            "properties": {
                                "block": {"type": "string", "description": "Block id, e.g. minecraft:stone"},
                                "x": {"type": "integer"},
                                "y": {"type": "integer"},
                                "z": {"type": "integer"},
                            },
                            "required": ["block", "x", "y", "z"],
                        },
                    },
                    "has_more": HAS_MORE_PROPERTY,
                },
                "required": ["blocks"],
            },
        }

    def guide(self) -> str:
        return BLOCK_PLACEMENT_GUIDE


STRATEGIES = {
    TextCommandStrategy.mode: TextCommandStrategy,
    BlockPlacementStrategy.mode: BlockPlacementStrategy,
}


def get_strategy(mode: str) -> BuildStrategy:
    """Strategy for a configured build mode ('text' or 'blocks')"""
    try:
        return STRATEGIES[mode]()
    except KeyError:
        raise ValueError(f"Unknown build mode: {mode!r} (expected one of {sorted(STRATEGIES)})") from None
