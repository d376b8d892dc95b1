from dataclasses import dataclass
from enum import Enum

from doctranslator.llm.models import AnalysisResult


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


IN_FLIGHT_STATUSES = frozenset({ProcessingStatus.UPLOADING, ProcessingStatus.PROCESSING})


@dataclass(frozen=True)
class ProcessingState:
    """Progress of the current (or last) upload as shown to the user."""

    status: ProcessingStatus = ProcessingStatus.IDLE
    progress: int = 0
    error: str | None = None
    analysis: AnalysisResult | None = None

    @property
    def is_processing(self) -> bool:
        return self.status in IN_FLIGHT_STATUSES
