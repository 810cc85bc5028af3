"""Schema definitions for build requests, operations and results."""

from .operations import *
from .progress import *
from .results import *

__all__ = [
    # Operations
    "BlockPosition",
    "BuildRequest",
    "TextCommand",
    "BlockPlacement",
    "Operation",
    "is_command_line",
    "split_lines",
    # Results
    "ExecutionResult",
    "BuildSession",
    # Progress
    "ProgressUpdate",
]
