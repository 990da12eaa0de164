from functools import partial
from pathlib import Path

from prefilter.config.settings import Settings
from prefilter.detection.exceptions import InitializationFailure
from prefilter.detection.heuristic_backend import HeuristicBackend
from prefilter.detection.learned_backend import LearnedModelBackend
from prefilter.detection.manifest import LIGHT_MANIFEST, CategoryManifest
from prefilter.detection.models import AnalysisMode
from prefilter.detection.onnx_runtime_adapter import OnnxModelRuntime
from prefilter.detection.service import DetectionService, LearnedBackendLoader


class DetectionServiceFactory:
    """Decides which backend variants exist; never scores anything itself."""

    @classmethod
    def create(cls, settings: Settings) -> DetectionService:
        loaders: dict[AnalysisMode, LearnedBackendLoader] = {}
        if settings.light_model_path.strip():
            loaders[AnalysisMode.LIGHT] = partial(
                cls._load_learned,
                Path(settings.light_model_path.strip()),
                LIGHT_MANIFEST,
            )
        if settings.deep_model_path.strip():
            deep_manifest = CategoryManifest(tuple(settings.deep_model_categories))
            loaders[AnalysisMode.DEEP] = partial(
                cls._load_learned,
                Path(settings.deep_model_path.strip()),
                deep_manifest,
            )
        return DetectionService(HeuristicBackend(), loaders)

    @staticmethod
    def _load_learned(model_path: Path, default_manifest: CategoryManifest) -> LearnedModelBackend:
        try:
            runtime = OnnxModelRuntime(model_path)
            manifest = CategoryManifest.for_model(model_path, default_manifest)
        except OSError as exc:
            raise InitializationFailure(f"Cannot access {model_path}: {exc}") from exc
        return LearnedModelBackend(runtime, manifest)
