"""
Per-layer gradient containers and block aggregation.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import logging

import numpy as np

from .errors import ConfigurationError, ShapeMismatchError

logger = logging.getLogger(__name__)


@dataclass
class GradientSet:
    """
    Weight and bias arrays for every layer of a model.

    ``weights[l]`` and ``biases[l]`` belong to layer ``l``. The same
    container is used for raw gradients, block averages and momentum.
    """

    weights: List[np.ndarray] = field(default_factory=list)
    biases: List[np.ndarray] = field(default_factory=list)

    def __post_init__(self):
        if len(self.weights) != len(self.biases):
            raise ShapeMismatchError(
                f"GradientSet has {len(self.weights)} weight layers "
                f"but {len(self.biases)} bias layers"
            )

    @property
    def layer_count(self) -> int:
        return len(self.weights)

    def shapes(self) -> List[Tuple[tuple, tuple]]:
        """(weight shape, bias shape) per layer."""
        return [
            (np.shape(w), np.shape(b)) for w, b in zip(self.weights, self.biases)
        ]

    def matches(self, other: "GradientSet") -> bool:
        return self.shapes() == other.shapes()

    def zeros_like(self) -> "GradientSet":
        return GradientSet(
            weights=[np.zeros_like(w, dtype=float) for w in self.weights],
            biases=[np.zeros_like(b, dtype=float) for b in self.biases],
        )

    def copy(self) -> "GradientSet":
        return GradientSet(
            weights=[np.array(w, dtype=float, copy=True) for w in self.weights],
            biases=[np.array(b, dtype=float, copy=True) for b in self.biases],
        )


def check_shapes(expected: GradientSet, actual: GradientSet, what: str = "gradient"):
    """Raise ShapeMismatchError when ``actual`` is not shaped like ``expected``."""
    if expected.layer_count != actual.layer_count:
        raise ShapeMismatchError(
            f"{what} has {actual.layer_count} layers, expected {expected.layer_count}"
        )
    for layer, (want, got) in enumerate(zip(expected.shapes(), actual.shapes())):
        if want != got:
            raise ShapeMismatchError(
                f"{what} layer {layer} has shapes {got}, expected {want}"
            )


class GradientAccumulator:
    """
    Averages the per-example gradients of one block.

    The mean is a plain arithmetic mean over the block; examples are not
    weighted.
    """

    def aggregate(self, gradients: Sequence[GradientSet]) -> GradientSet:
        """
        Sum every layer across the block and divide by the block size.

        Args:
            gradients: One GradientSet per example, all shaped alike

        Returns:
            A new GradientSet; the inputs are left untouched
        """
        if len(gradients) == 0:
            raise ConfigurationError("Cannot aggregate an empty block")

        first = gradients[0]
        for gradient in gradients[1:]:
            check_shapes(first, gradient)

        total = first.copy()
        for gradient in gradients[1:]:
            for layer in range(total.layer_count):
                total.weights[layer] += gradient.weights[layer]
                total.biases[layer] += gradient.biases[layer]

        size = float(len(gradients))
        for layer in range(total.layer_count):
            total.weights[layer] /= size
            total.biases[layer] /= size

        return total
