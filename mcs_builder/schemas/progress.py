"""Progress reporting schema for long-running executions."""

from pydantic import BaseModel, Field


class ProgressUpdate(BaseModel):
    """Progress of an execution run."""
    handle: str = Field(..., description="Command file or placement batch being executed")
    done: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    unit: str = "commands executed"

    @property
    def progress_percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.done * 100.0 / self.total

    def message(self) -> str:
        return f"Progress: {self.done}/{self.total} {self.unit} ({self.progress_percent:.1f}%)"
