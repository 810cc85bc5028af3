"""
Command Store - persists command lists as line-oriented .mcs files
"""

import re
import uuid
from pathlib import Path
from typing import Iterable, List, Union

from .errors import StoreError
from .logging_config import get_logger
from .schemas import Operation, is_command_line, split_lines

logger = get_logger(__name__)

MCS_EXTENSION = ".mcs"
UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_\-]")

Handle = Union[str, Path]


class CommandStore:
    """Directory of stored MCS command files"""

    def __init__(self, directory: Union[str, Path] = "mcs_files"):
        self.directory = Path(directory)

    def initialize(self) -> None:
        """Create the store directory if it doesn't exist"""
        try:
            if not self.directory.exists():
                self.directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created MCS directory", path=str(self.directory.resolve()))
        except OSError as e:
            raise StoreError(f"Could not create MCS directory {self.directory}: {e}") from e

    @staticmethod
    def sanitize_name(name: str) -> str:
        """Filesystem-safe version of a build name"""
        if name.endswith(MCS_EXTENSION):
            name = name[: -len(MCS_EXTENSION)]
        safe = UNSAFE_NAME_CHARS.sub("_", name.strip())
        return safe or "build"

    @staticmethod
    def new_build_name() -> str:
        return "build_" + uuid.uuid4().hex[:8]

    def path_for(self, name: str) -> Path:
        return self.directory / (self.sanitize_name(name) + MCS_EXTENSION)

    def persist(self, name: str, operations: Iterable[Operation]) -> Path:
        """Store operations one per line

        Args:
            name: Build name (sanitized before use)
            operations: Text commands are written verbatim, placements as setblock lines

        Returns:
            Handle (absolute path) of the stored file
        """
        return self.persist_text(name, "\n".join(op.to_line() for op in operations))

    def persist_text(self, name: str, content: str) -> Path:
        self.initialize()
        path = self.path_for(name)
        try:
            path.write_text(content + "\n" if content and not content.endswith("\n") else content, encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not save MCS file {path}: {e}") from e

        logger.info("Saved MCS file", path=str(path.resolve()))
        return path.resolve()

    def resolve(self, handle: Handle) -> Path:
        """Path of a stored file from a path or a bare build name

        Bare names always map into the store directory. Paths are accepted only
        when they point inside it.

        Raises:
            StoreError: The handle points outside the store directory
        """
        path = Path(handle)
        if path.parent == Path("."):
            return self.path_for(str(handle)).resolve()

        resolved = path.resolve()
        if not resolved.is_relative_to(self.directory.resolve()):
            raise StoreError(f"MCS file {handle} is outside the store directory {self.directory}")
        return resolved

    def load(self, handle: Handle) -> List[str]:
        """Read the raw lines of a stored file"""
        path = self.resolve(handle)
        try:
            return split_lines(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StoreError(f"Could not read MCS file {path}: {e}") from e

    def list_builds(self) -> List[Path]:
        """Stored files, newest first"""
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob("*" + MCS_EXTENSION), key=lambda p: p.stat().st_mtime, reverse=True)

    @staticmethod
    def count_commands(lines: Iterable[str]) -> int:
        """Number of lines the execution engine will send to the world"""
        return sum(1 for line in lines if is_command_line(line))

    def count_file_commands(self, handle: Handle) -> int:
        return self.count_commands(self.load(handle))
