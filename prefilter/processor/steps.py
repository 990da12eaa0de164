from prefilter.detection.exceptions import InitializationFailure
from prefilter.detection.models import AnalysisMode
from prefilter.detection.service import DetectionService, InitState
from prefilter.logging.logger import Log
from prefilter.preferences.mode_preferences import ModePreferences
from prefilter.processor.image_source import ImageSource
from prefilter.processor.models import (
    PRIVACY_BLOCKED_TAG,
    SENSITIVE_TAG,
    DetectionVerdict,
)
from prefilter.processor.pipeline import PipelineContext, PipelineStep


class ResolveModeStep(PipelineStep):
    """Use the caller's mode, else the saved preference."""

    def __init__(self, mode_preferences: ModePreferences) -> None:
        self._mode_preferences = mode_preferences

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.requested_mode is not None:
            context.mode = context.requested_mode
        else:
            context.mode = self._mode_preferences.get_mode()
        Log.debug(f"Screenshot {context.screenshot.id}: mode {context.mode.value}")
        return context


class SkipWhenOffStep(PipelineStep):
    """Finish with an allow, untouched, when analysis is off."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.mode is AnalysisMode.OFF:
            context.verdict = DetectionVerdict.allowed()
            context.updated_screenshot = context.screenshot
            context.finished = True
        return context


class AcquireBytesStep(PipelineStep):
    """Load the encoded image bytes."""

    def __init__(self, image_source: ImageSource) -> None:
        self._image_source = image_source

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._image_source.load(context.screenshot)
        Log.debug(f"Loaded {len(context.raw_bytes)} bytes for screenshot {context.screenshot.id}")
        return context


class EnsureBackendStep(PipelineStep):
    """Make sure the detection service has finished initializing."""

    def __init__(self, detection_service: DetectionService) -> None:
        self._detection_service = detection_service

    def run(self, context: PipelineContext) -> PipelineContext:
        state = self._detection_service.initialize()
        if state not in (InitState.READY, InitState.READY_FALLBACK):
            raise InitializationFailure(f"Detection service not ready: {state.value}")
        return context


class DetectStep(PipelineStep):
    """Score the bytes with whichever backend serves the mode."""

    def __init__(self, detection_service: DetectionService) -> None:
        self._detection_service = detection_service

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.mode is None:
            raise ValueError("PipelineContext.mode must be set before detection")
        with Log.timed(f"Analysis of screenshot {context.screenshot.id}"):
            context.outcome = self._detection_service.analyze(context.raw_bytes, context.mode)
        return context


class BuildVerdictStep(PipelineStep):
    """Turn raw backend scores into a verdict."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before building a verdict")
        context.verdict = DetectionVerdict.from_scores(context.outcome.raw_scores)
        if context.verdict.allow:
            Log.info(f"Screenshot {context.screenshot.id}: no sensitive content detected")
        else:
            Log.info(
                f"Screenshot {context.screenshot.id} blocked by {context.outcome.backend} "
                f"backend: {context.verdict.categories_display} "
                f"({context.verdict.confidence:.0%})"
            )
        return context


class TagScreenshotStep(PipelineStep):
    """Mark blocked screenshots with the sensitive tags."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.verdict is None:
            raise ValueError("PipelineContext.verdict must be set before tagging")
        if context.verdict.allow:
            context.updated_screenshot = context.screenshot
        else:
            context.updated_screenshot = context.screenshot.with_tags(
                SENSITIVE_TAG, PRIVACY_BLOCKED_TAG
            )
        context.finished = True
        return context
