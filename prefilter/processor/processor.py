import threading
from collections.abc import Iterable

from prefilter.config.settings import Settings
from prefilter.detection.exceptions import (
    BackendRuntimeFailure,
    DecodeFailure,
    InitializationFailure,
    PrefilterError,
)
from prefilter.detection.factory import DetectionServiceFactory
from prefilter.detection.models import AnalysisMode
from prefilter.detection.service import BackendStatus, DetectionService
from prefilter.logging.logger import Log
from prefilter.preferences.base import BasePreferenceStore
from prefilter.preferences.factory import PreferenceStoreFactory
from prefilter.preferences.mode_preferences import ModePreferences
from prefilter.processor.batch import BatchAnalyzer, ProgressCallback
from prefilter.processor.exceptions import DataUnavailable
from prefilter.processor.image_source import ImageSource
from prefilter.processor.models import AnalysisResult, DetectionVerdict, Screenshot
from prefilter.processor.pipeline import PipelineContext, PipelineStep
from prefilter.processor.steps import (
    AcquireBytesStep,
    BuildVerdictStep,
    DetectStep,
    EnsureBackendStep,
    ResolveModeStep,
    SkipWhenOffStep,
    TagScreenshotStep,
)

# Every failure resolves to "allow". A silent allow looks exactly like
# "nothing detected" to the caller; only the log tells them apart.
_FAIL_OPEN_REASONS: dict[type[PrefilterError], str] = {
    DataUnavailable: "no image data",
    DecodeFailure: "image could not be decoded",
    InitializationFailure: "detection backend unavailable",
    BackendRuntimeFailure: "detection backend failed",
}


class Prefilter:
    """Decides whether a screenshot may leave the device.

    Pipeline: resolve mode -> skip when off -> load bytes -> ensure backend
    -> detect -> build verdict -> tag screenshot.
    """

    def __init__(
        self,
        mode_preferences: ModePreferences,
        image_source: ImageSource,
        detection_service: DetectionService,
    ) -> None:
        self._mode_preferences = mode_preferences
        self._detection_service = detection_service
        self._steps: list[PipelineStep] = [
            ResolveModeStep(mode_preferences),
            SkipWhenOffStep(),
            AcquireBytesStep(image_source),
            EnsureBackendStep(detection_service),
            DetectStep(detection_service),
            BuildVerdictStep(),
            TagScreenshotStep(),
        ]
        self._batch = BatchAnalyzer(self.analyze, self.get_mode)

    def analyze(self, screenshot: Screenshot, mode: AnalysisMode | None = None) -> AnalysisResult:
        """Analyze one screenshot. Never raises for analysis failures."""
        context = PipelineContext(screenshot=screenshot, requested_mode=mode)
        try:
            for step in self._steps:
                context = step.run(context)
                if context.finished:
                    break
        except PrefilterError as exc:
            return self._fail_open(context, exc)

        if context.verdict is None or context.updated_screenshot is None:
            raise ValueError("Pipeline finished without a verdict")
        return AnalysisResult(verdict=context.verdict, screenshot=context.updated_screenshot)

    def analyze_many(
        self,
        screenshots: Iterable[Screenshot],
        mode: AnalysisMode | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, AnalysisResult]:
        return self._batch.analyze_many(
            screenshots,
            mode=mode,
            on_progress=on_progress,
            cancel_event=cancel_event,
        )

    def get_mode(self) -> AnalysisMode:
        """Saved analysis mode; LIGHT when nothing usable is stored."""
        return self._mode_preferences.get_mode()

    def set_mode(self, mode: AnalysisMode) -> None:
        self._mode_preferences.set_mode(mode)
        Log.info(f"Prefilter mode set to {mode.value}")

    def is_enabled(self) -> bool:
        """False only when the saved mode is OFF."""
        return self.get_mode().is_enabled

    def backend_status(self) -> BackendStatus:
        """Current backend snapshot. Does not trigger initialization."""
        return self._detection_service.status()

    @staticmethod
    def _fail_open(context: PipelineContext, exc: PrefilterError) -> AnalysisResult:
        reason = next(
            (text for kind, text in _FAIL_OPEN_REASONS.items() if isinstance(exc, kind)),
            "analysis failed",
        )
        Log.warning(f"Allowing screenshot {context.screenshot.id} ({reason}): {exc}")
        return AnalysisResult(verdict=DetectionVerdict.allowed(), screenshot=context.screenshot)


def build_prefilter(
    settings: Settings,
    image_source: ImageSource | None = None,
    preference_store: BasePreferenceStore | None = None,
) -> Prefilter:
    """Build a Prefilter with the adapters selected in settings."""
    store = preference_store or PreferenceStoreFactory.create(settings)
    return Prefilter(
        mode_preferences=ModePreferences(store),
        image_source=image_source or ImageSource(),
        detection_service=DetectionServiceFactory.create(settings),
    )
