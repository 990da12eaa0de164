from abc import ABC, abstractmethod
from dataclasses import dataclass

from prefilter.detection.models import AnalysisMode, DetectionOutcome
from prefilter.processor.models import DetectionVerdict, Screenshot


@dataclass(slots=True)
class PipelineContext:
    screenshot: Screenshot
    requested_mode: AnalysisMode | None = None
    mode: AnalysisMode | None = None
    raw_bytes: bytes = b""
    outcome: DetectionOutcome | None = None
    verdict: DetectionVerdict | None = None
    updated_screenshot: Screenshot | None = None
    finished: bool = False


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
