"""Backend selection with a one-shot, thread-safe initializer."""

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from prefilter.detection.exceptions import BackendRuntimeFailure, InitializationFailure
from prefilter.detection.heuristic_backend import HeuristicBackend
from prefilter.detection.learned_backend import LearnedModelBackend
from prefilter.detection.models import AnalysisMode, DetectionCategory, DetectionOutcome
from prefilter.logging.logger import Log

LearnedBackendLoader = Callable[[], LearnedModelBackend]


class InitState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    READY_FALLBACK = "ready_fallback"


@dataclass(frozen=True)
class BackendStatus:
    """Snapshot of what the detection service can currently do."""

    state: InitState
    learned_model_loaded: bool
    available_categories: tuple[str, ...]
    models_loaded: dict[str, bool] = field(default_factory=dict)

    @property
    def initialized(self) -> bool:
        return self.state in (InitState.READY, InitState.READY_FALLBACK)


class DetectionService:
    """Routes each analysis to the learned model for its mode, or the heuristic.

    Learned models load once, on the first initialize() call. A model that
    fails to load, for whatever reason, only removes that model; the heuristic
    is always available and initialize() always ends READY or READY_FALLBACK.
    """

    def __init__(
        self,
        heuristic: HeuristicBackend,
        learned_loaders: Mapping[AnalysisMode, LearnedBackendLoader] | None = None,
    ) -> None:
        self._heuristic = heuristic
        self._loaders = dict(learned_loaders or {})
        self._learned: dict[AnalysisMode, LearnedModelBackend] = {}
        self._state = InitState.NOT_STARTED
        self._lock = threading.Lock()

    @property
    def state(self) -> InitState:
        return self._state

    def initialize(self) -> InitState:
        """Load the configured learned models. Safe to call repeatedly."""
        if self._is_ready():
            return self._state
        with self._lock:
            if self._is_ready():
                return self._state
            self._state = InitState.IN_PROGRESS
            for mode, loader in self._loaders.items():
                try:
                    self._learned[mode] = loader()
                    Log.info(f"Learned model ready for {mode.value} mode")
                except InitializationFailure as exc:
                    Log.warning(f"No learned model for {mode.value} mode, using heuristic: {exc}")
                except Exception as exc:
                    Log.error(f"Loading the {mode.value} model failed unexpectedly: {exc}")
            self._state = InitState.READY if self._learned else InitState.READY_FALLBACK
            Log.info(f"Detection service initialized: {self._state.value}")
            return self._state

    def analyze(self, image_bytes: bytes, mode: AnalysisMode) -> DetectionOutcome:
        """Score *image_bytes* under *mode*.

        Raises:
            DecodeFailure: if the bytes are not an image.
            BackendRuntimeFailure: if the heuristic itself fails.
        """
        if mode is AnalysisMode.OFF:
            return DetectionOutcome.empty()
        self.initialize()

        learned = self._learned.get(mode)
        if learned is None:
            return self._heuristic.analyze(image_bytes, mode)
        try:
            return learned.analyze(image_bytes, mode)
        except BackendRuntimeFailure as exc:
            Log.warning(f"Learned model failed, using heuristic for this image: {exc}")
            return self._heuristic.analyze(image_bytes, mode)

    def status(self) -> BackendStatus:
        """Snapshot of the init state and loaded models. Never initializes."""
        categories = [DetectionCategory.CREDIT_CARD.value]
        for backend in self._learned.values():
            categories.extend(k for k in backend.manifest.keys if k not in categories)
        return BackendStatus(
            state=self._state,
            learned_model_loaded=bool(self._learned),
            available_categories=tuple(categories),
            models_loaded={
                mode.value: mode in self._learned
                for mode in (AnalysisMode.LIGHT, AnalysisMode.DEEP)
            },
        )

    def _is_ready(self) -> bool:
        return self._state in (InitState.READY, InitState.READY_FALLBACK)
