"""Operation schemas - the units of work produced from a model reply."""

from typing import List, Literal, Tuple, Union

from pydantic import BaseModel, Field, validator

COMMENT_PREFIX = "#"


def split_lines(text: str) -> List[str]:
    """Split text into lines at LF (or CRLF) only; other Unicode separators stay inside a line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def is_command_line(line: str) -> bool:
    """True for lines that will be sent to the world (not blank, not a comment)."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX)


class BlockPosition(BaseModel):
    """Integer block coordinates in the Minecraft world."""
    x: int = Field(..., description="X coordinate")
    y: int = Field(..., description="Y coordinate")
    z: int = Field(..., description="Z coordinate")

    class Config:
        frozen = True

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


class BuildRequest(BaseModel):
    """A player's building request."""
    prompt: str = Field(..., min_length=1, description="Free-text building request")
    origin: BlockPosition = Field(default_factory=lambda: BlockPosition(x=0, y=64, z=0))

    class Config:
        frozen = True

    @validator("prompt")
    def strip_prompt(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("prompt is empty")
        return v

    def contextual_prompt(self) -> str:
        """Prompt text with the player's position prepended."""
        return (
            f"Player is at position ({self.origin.x}, {self.origin.y}, {self.origin.z}) "
            f"in Minecraft and wants: {self.prompt}"
        )


class TextCommand(BaseModel):
    """One line of Minecraft command syntax (or a comment)."""
    kind: Literal["text"] = "text"
    line: str

    @property
    def is_command(self) -> bool:
        return is_command_line(self.line)

    def to_line(self) -> str:
        return self.line


class BlockPlacement(BaseModel):
    """A single block assignment."""
    kind: Literal["block"] = "block"
    block_id: str = Field(..., min_length=1, description="Block type id, e.g. minecraft:stone")
    x: int
    y: int
    z: int

    @validator("block_id")
    def strip_block_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("block id is empty")
        return v

    @validator("x", "y", "z", pre=True)
    def reject_bool_coordinates(cls, v):
        if isinstance(v, bool):
            raise ValueError("coordinate must be an integer")
        return v

    @property
    def is_command(self) -> bool:
        return True

    @property
    def position(self) -> BlockPosition:
        return BlockPosition(x=self.x, y=self.y, z=self.z)

    def to_line(self) -> str:
        """Equivalent setblock command, used for stored audit copies."""
        return f"/setblock {self.x} {self.y} {self.z} {self.block_id}"


Operation = Union[TextCommand, BlockPlacement]
