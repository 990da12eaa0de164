from prefilter.detection.base import BaseDetectionBackend
from prefilter.detection.factory import DetectionServiceFactory
from prefilter.detection.heuristic_backend import HeuristicBackend
from prefilter.detection.learned_backend import LearnedModelBackend
from prefilter.detection.service import BackendStatus, DetectionService, InitState

__all__ = [
    "BackendStatus",
    "BaseDetectionBackend",
    "DetectionService",
    "DetectionServiceFactory",
    "HeuristicBackend",
    "InitState",
    "LearnedModelBackend",
]
