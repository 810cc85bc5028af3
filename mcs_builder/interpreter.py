"""
Response Interpreter - turns a Claude reply into an ordered list of operations
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .errors import ParseError
from .logging_config import get_logger
from .schemas import BlockPlacement, Operation, TextCommand, split_lines

logger = get_logger(__name__)

DEFAULT_TOOL_NAME = "generate_mcs"

# Fenced blocks matched in pairs; the opening newline is optional so inline fences count
CODE_FENCE_PATTERN = re.compile(r"```([\w-]*)[ \t]*\r?\n?([\s\S]*?)```")

# Preferred fence tags, in order; "" is an untagged fence
CODE_BLOCK_TAGS = ("mcs", "minecraft", "")

COMMAND_VERBS = ("/fill ", "/setblock ", "/clone ", "/execute ")

RAW_RESPONSE_HEADER = "# No structured MCS content found. Raw response:"


class ExtractionSource:
    """Which extraction step produced the operations"""

    TOOL_COMMANDS = "tool_commands"
    TOOL_BLOCKS = "tool_blocks"
    CODE_BLOCK = "code_block"
    COMMAND_LINES = "command_lines"
    RAW_TEXT = "raw_text"


@dataclass
class Extraction:
    """Operations extracted from one reply, plus what the orchestrator needs from it"""

    operations: List[Operation]
    source: str
    text: str = ""
    skipped_records: int = 0
    has_more: bool = False

    @property
    def is_placement(self) -> bool:
        return self.source == ExtractionSource.TOOL_BLOCKS

    @property
    def placements(self) -> List[BlockPlacement]:
        return [op for op in self.operations if isinstance(op, BlockPlacement)]

    @property
    def command_count(self) -> int:
        return sum(1 for op in self.operations if op.is_command)


class ResponseInterpreter:
    """Extracts operations from Claude replies"""

    def __init__(self, tool_name: str = DEFAULT_TOOL_NAME):
        self.tool_name = tool_name

    def extract(self, reply: Any) -> Extraction:
        """Extract the command list from a reply

        Args:
            reply: Decoded JSON reply from the Messages API

        Returns:
            Extraction, never empty of operations

        Raises:
            ParseError: The reply carries an API error, has no content, or content is not an array
        """
        if isinstance(reply, dict) and isinstance(reply.get("error"), dict):
            message = reply["error"].get("message", "unknown error")
            logger.error("API error", message=message)
            raise ParseError(f"Error from Claude API: {message}")

        if not isinstance(reply, dict) or "content" not in reply:
            logger.error("Invalid API response format: missing content")
            raise ParseError("Invalid API response format: missing content")

        content = reply["content"]
        if not isinstance(content, list):
            logger.error("Invalid API response format: content not array")
            raise ParseError("Invalid API response format: content not array")

        blocks = [block for block in content if isinstance(block, dict)]
        tool_uses = [block for block in blocks if block.get("type") == "tool_use"]
        text = self._extract_text(blocks)
        has_more = any(self._input(block).get("has_more") is True for block in tool_uses)

        commands = self._find_tool_commands(tool_uses)
        if commands:
            logger.info("Found MCS commands in tool call", tool=self.tool_name)
            return Extraction(
                operations=[TextCommand(line=line) for line in split_lines(commands)],
                source=ExtractionSource.TOOL_COMMANDS,
                text=text,
                has_more=has_more,
            )

        placements, skipped = self._find_tool_placements(tool_uses)
        if placements:
            logger.info("Found block placements in tool call", placements=len(placements), skipped=skipped)
            return Extraction(
                operations=placements,
                source=ExtractionSource.TOOL_BLOCKS,
                text=text,
                skipped_records=skipped,
                has_more=has_more,
            )

        code = self.extract_code_block(text)
        if code:
            logger.info("Found MCS commands in code block")
            return Extraction(
                operations=[TextCommand(line=line) for line in split_lines(code)],
                source=ExtractionSource.CODE_BLOCK,
                text=text,
                skipped_records=skipped,
                has_more=has_more,
            )

        lines = self.extract_command_lines(text)
        if lines:
            logger.info("Found bare command lines in text", lines=len(lines))
            return Extraction(
                operations=[TextCommand(line=line) for line in lines],
                source=ExtractionSource.COMMAND_LINES,
                text=text,
                skipped_records=skipped,
                has_more=has_more,
            )

        logger.warning("No structured MCS content found in reply")
        return Extraction(
            operations=[TextCommand(line=line) for line in split_lines(self.comment_out(text))],
            source=ExtractionSource.RAW_TEXT,
            text=text,
            skipped_records=skipped,
            has_more=has_more,
        )

    @staticmethod
    def _input(block: Dict[str, Any]) -> Dict[str, Any]:
        payload = block.get("input")
        return payload if isinstance(payload, dict) else {}

    @staticmethod
    def _extract_text(blocks: List[Dict[str, Any]]) -> str:
        parts = []
        for block in blocks:
            if block.get("type") == "text" and isinstance(block.get("text"), str):
                parts.append(block["text"] + "\n")
        return "".join(parts)

    def _find_tool_commands(self, tool_uses: List[Dict[str, Any]]) -> Optional[str]:
        for block in tool_uses:
            if block.get("name") != self.tool_name:
                continue
            commands = self._input(block).get("commands")
            if isinstance(commands, str) and commands.strip():
                return commands
        return None

    def _find_tool_placements(self, tool_uses: List[Dict[str, Any]]):
        placements: List[BlockPlacement] = []
        skipped = 0

        for block in tool_uses:
            records = self._input(block).get("blocks")
            if not isinstance(records, list):
                continue

            for index, record in enumerate(records):
                placement = self.parse_placement(record)
                if placement is None:
                    skipped += 1
                    logger.warning("Skipping malformed block record", tool=block.get("name"), index=index, record=record)
                    continue
                placements.append(placement)

        return placements, skipped

    @staticmethod
    def parse_placement(record: Any) -> Optional[BlockPlacement]:
        """Validate one block record; None when it is malformed"""
        if not isinstance(record, dict):
            return None
        block_id = record.get("block", record.get("block_id"))
        try:
            return BlockPlacement(block_id=block_id, x=record.get("x"), y=record.get("y"), z=record.get("z"))
        except ValidationError:
            return None

    @staticmethod
    def extract_code_block(text: str) -> Optional[str]:
        """Contents of the first fenced code block, preferring mcs then minecraft tags"""
        blocks = [(match.group(1).lower(), match.group(2).strip()) for match in CODE_FENCE_PATTERN.finditer(text)]
        for tag in CODE_BLOCK_TAGS:
            for block_tag, body in blocks:
                if block_tag == tag and body:
                    return body
        return None

    @staticmethod
    def extract_command_lines(text: str) -> List[str]:
        """Lines of free text that look like Minecraft commands"""
        commands = []
        for line in split_lines(text):
            line = line.strip()
            if line.startswith("/") and " " not in line and len(line) > 1:
                commands.append(line)
            elif line.startswith(COMMAND_VERBS):
                commands.append(line)
        return commands

    @staticmethod
    def comment_out(text: str) -> str:
        """Preserve a reply as comment lines"""
        return RAW_RESPONSE_HEADER + "\n# " + text.replace("\n", "\n# ")
