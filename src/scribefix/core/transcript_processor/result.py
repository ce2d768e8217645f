from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResultSource(str, Enum):
    ORIGINAL = "original"
    CORRECTED = "corrected"


class FailureReason(str, Enum):
    UNAVAILABLE = "unavailable"
    PROCESS_FAILED = "process_failed"
    TIMEOUT = "timeout"
    EMPTY_INPUT = "empty_input"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class InvocationResult:
    text: str
    source: ResultSource
    failure_reason: Optional[FailureReason] = None

    @classmethod
    def corrected(cls, text: str) -> "InvocationResult":
        return cls(text=text, source=ResultSource.CORRECTED)

    @classmethod
    def original(
        cls, text: str, failure_reason: Optional[FailureReason] = None
    ) -> "InvocationResult":
        return cls(text=text, source=ResultSource.ORIGINAL, failure_reason=failure_reason)

    @property
    def is_corrected(self) -> bool:
        return self.source == ResultSource.CORRECTED

    @property
    def is_fallback(self) -> bool:
        """True when a correction was attempted but the original text came back."""
        return self.source == ResultSource.ORIGINAL and self.failure_reason not in (
            None,
            FailureReason.EMPTY_INPUT,
        )
