"""
Boundary the training loop expects from a model.
"""

from typing import Any, Protocol, Tuple

from .gradients import GradientSet


class Model(Protocol):
    """Protocol for models driven by TrainingLoop."""

    def compute_gradients(self, input: Any, target: Any) -> Tuple[GradientSet, float]:
        """Gradient and scalar loss for one example. Must not change parameters."""
        ...

    def apply_update(self, update: GradientSet) -> None:
        """Subtract ``update`` from the stored parameters in place."""
        ...

    def gradient_frame(self) -> GradientSet:
        """Zero-filled GradientSet shaped like the parameters."""
        ...

    def layer_count(self) -> int:
        ...
