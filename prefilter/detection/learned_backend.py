import numpy as np
from numpy.typing import NDArray

from prefilter.detection.base import BaseDetectionBackend
from prefilter.detection.exceptions import BackendRuntimeFailure
from prefilter.detection.manifest import CategoryManifest
from prefilter.detection.models import AnalysisMode, DetectionOutcome, RawScoreMap
from prefilter.detection.raster import RasterImage, decode_image
from prefilter.detection.runtime_base import BaseModelRuntime
from prefilter.logging.logger import Log

LEARNED_THRESHOLD = 0.5


class LearnedModelBackend(BaseDetectionBackend):
    """Scores images with a trained classifier.

    The first row of the first output tensor holds one probability per
    manifest key; each is thresholded independently.
    """

    name = "learned"

    def __init__(self, runtime: BaseModelRuntime, manifest: CategoryManifest) -> None:
        self._runtime = runtime
        self._manifest = manifest

    @property
    def manifest(self) -> CategoryManifest:
        return self._manifest

    def analyze(self, image_bytes: bytes, mode: AnalysisMode) -> DetectionOutcome:
        with Log.timed("Image decode"):
            image = decode_image(image_bytes)
        try:
            with Log.timed("Preprocessing"):
                tensor = self._preprocess(image)
            with Log.timed(f"Inference ({mode.value})"):
                outputs = self._runtime.run(tensor)
            scores = self._interpret(outputs)
        except BackendRuntimeFailure:
            raise
        except Exception as exc:
            raise BackendRuntimeFailure(f"Model inference failed: {exc}") from exc
        return DetectionOutcome(raw_scores=scores, backend=self.name)

    def _preprocess(self, image: RasterImage) -> NDArray[np.float32]:
        height, width = self._runtime.input_size
        resized = image.resized(width, height)
        normalized = resized.pixels.astype(np.float32) / 255.0
        return normalized[np.newaxis, ...]

    def _interpret(self, outputs: list[NDArray[np.float32]]) -> RawScoreMap:
        if not outputs:
            Log.warning("Model produced no output tensors")
            return {}
        first = np.asarray(outputs[0], dtype=np.float32)
        if first.ndim == 2:
            predictions = first[0] if first.shape[0] else first.reshape(-1)
        elif first.ndim == 1:
            predictions = first
        else:
            raise BackendRuntimeFailure(f"Unexpected model output shape {first.shape}")
        Log.debug(f"Raw model predictions: {predictions.tolist()}")

        return {
            key: score
            for key, score in self._manifest.pair(predictions.tolist())
            if score > LEARNED_THRESHOLD
        }
