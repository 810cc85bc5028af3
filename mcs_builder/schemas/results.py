"""Result schemas for execution runs and build sessions."""

from typing import Optional

from pydantic import BaseModel, Field


class ExecutionResult(BaseModel):
    """Counts from one execution run.

    Every line (or record) ends up in exactly one bucket:
    executed + skipped + failed == total.
    """
    total_operations: int = Field(0, ge=0)
    executed_count: int = Field(0, ge=0)
    skipped_count: int = Field(0, ge=0)
    failed_count: int = Field(0, ge=0)

    @property
    def blocks_placed(self) -> int:
        return self.executed_count

    @property
    def attempted_count(self) -> int:
        return self.executed_count + self.failed_count

    def __add__(self, other: "ExecutionResult") -> "ExecutionResult":
        return ExecutionResult(
            total_operations=self.total_operations + other.total_operations,
            executed_count=self.executed_count + other.executed_count,
            skipped_count=self.skipped_count + other.skipped_count,
            failed_count=self.failed_count + other.failed_count,
        )


class BuildSession(BaseModel):
    """State of one build invocation across its rounds."""
    rounds_completed: int = 0
    aggregate: ExecutionResult = Field(default_factory=ExecutionResult)
    terminated: bool = False
    truncated: bool = Field(False, description="Stopped at the round cap while more content was signaled")
    error: Optional[str] = Field(None, description="Message of the error that ended the session")

    def record_round(self, result: ExecutionResult) -> None:
        self.rounds_completed += 1
        self.aggregate = self.aggregate + result

    @property
    def succeeded(self) -> bool:
        return self.error is None
