"""Error tracking data models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ErrorRecord(BaseModel):
    """Error record for a failed patch application."""

    phase: str
    error_type: str
    message: str
    revision_pair: Optional[str] = None
    stack_trace: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        phase: str,
        revision_pair: Optional[str] = None,
    ) -> "ErrorRecord":
        return cls(
            phase=phase,
            error_type=type(error).__name__,
            message=str(error),
            revision_pair=revision_pair,
        )

    def summary(self) -> str:
        pair = self.revision_pair or "<unknown>"
        return (
            f"patch application failed for revision pair {pair} "
            f"during {self.phase}: {self.error_type}: {self.message}"
        )
