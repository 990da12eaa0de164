from pathlib import Path

import numpy as np
import onnxruntime as ort
from numpy.typing import NDArray

from prefilter.detection.exceptions import InitializationFailure
from prefilter.detection.runtime_base import BaseModelRuntime
from prefilter.logging.logger import Log


class OnnxModelRuntime(BaseModelRuntime):
    """Runs an NHWC image classifier exported to ONNX, on CPU only."""

    PROVIDERS = ["CPUExecutionProvider"]

    def __init__(self, model_path: Path) -> None:
        if not model_path.is_file():
            raise InitializationFailure(f"Model asset not found: {model_path}")
        try:
            self._session = ort.InferenceSession(str(model_path), providers=self.PROVIDERS)
        except Exception as exc:
            raise InitializationFailure(f"Failed to load model {model_path}: {exc}") from exc

        model_input = self._session.get_inputs()[0]
        self._input_name: str = model_input.name
        self._input_size = self._declared_size(model_input.shape, model_path)
        Log.info(
            f"Loaded model {model_path.name} "
            f"({model_path.stat().st_size} bytes, input {self._input_size})"
        )

    @property
    def input_size(self) -> tuple[int, int]:
        return self._input_size

    def run(self, tensor: NDArray[np.float32]) -> list[NDArray[np.float32]]:
        outputs = self._session.run(None, {self._input_name: tensor})
        return [np.asarray(output, dtype=np.float32) for output in outputs]

    @staticmethod
    def _declared_size(shape: list[object], model_path: Path) -> tuple[int, int]:
        # [batch, height, width, channels]; batch may be symbolic
        if len(shape) != 4:
            raise InitializationFailure(
                f"Model {model_path} input must be 4-D NHWC, got {shape}"
            )
        height, width = shape[1], shape[2]
        if not isinstance(height, int) or not isinstance(width, int):
            raise InitializationFailure(
                f"Model {model_path} input needs a fixed height and width, got {shape}"
            )
        return height, width
