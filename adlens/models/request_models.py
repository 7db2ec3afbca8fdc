"""ADLENS — Request Resilience Models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class RetryPolicy(BaseModel):
    """Timeout and retry configuration for a single logical remote call."""

    timeout_ms: int = Field(default=30_000, gt=0)
    max_retries: int = Field(default=2, ge=0)
    base_delay_ms: int = Field(default=1_000, ge=0)

    model_config = {"frozen": True}

    def delay_for(self, attempt: int) -> float:
        """Backoff in seconds before retrying after ``attempt`` (0-based). Linear."""
        return self.base_delay_ms * (attempt + 1) / 1000


class OutcomeStatus(str, Enum):
    """How a single attempt ended."""

    SUCCESS = "success"
    RETRYABLE = "retryable_failure"
    TERMINAL = "terminal_failure"


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to callers."""

    CLIENT = "client"  # 4xx, request rejected
    SERVER = "server"  # 5xx
    NETWORK = "network"  # Connection-level failure
    TIMEOUT = "timeout"  # Deadline exceeded


class RequestOutcome(BaseModel):
    """Result of one attempt, before the executor decides to retry or stop."""

    status: OutcomeStatus
    status_code: int = 0
    payload: Any = None
    error_kind: Optional[ErrorKind] = None
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def retryable(self) -> bool:
        return self.status == OutcomeStatus.RETRYABLE
