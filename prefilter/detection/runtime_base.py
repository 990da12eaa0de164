from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray


class BaseModelRuntime(ABC):
    """Contract for the learned-model runtimes a backend can drive."""

    @property
    @abstractmethod
    def input_size(self) -> tuple[int, int]:
        """Declared (height, width) of the model's image input."""

    @abstractmethod
    def run(self, tensor: NDArray[np.float32]) -> list[NDArray[np.float32]]:
        """Run inference on a 1xHxWx3 tensor with channels in [0, 1].

        Returns:
            The model's output tensors, in declaration order.
        """
