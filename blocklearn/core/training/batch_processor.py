"""
Per-example gradient computation for one block.

Runs the model over every example of a block and hands back the raw
gradients and losses, leaving aggregation to the caller.
"""

from typing import List, Sequence, Tuple
import logging

from .error_tracker import ErrorTracker
from .gradients import GradientSet
from .model import Model
from .sources import ExampleBlock

logger = logging.getLogger(__name__)


class BlockProcessor:
    """
    Computes per-example gradients for a block.

    Handles:
    - One ``compute_gradients`` call per example, in block order
    - Recording the block's losses into the error tracker once the block
      has been applied
    """

    def __init__(self, model: Model, error_tracker: ErrorTracker):
        """
        Initialize block processor.

        Args:
            model: Model providing ``compute_gradients``
            error_tracker: Receives every per-example loss
        """
        self.model = model
        self.error_tracker = error_tracker

    def process_block(self, block: ExampleBlock) -> Tuple[List[GradientSet], List[float]]:
        """
        Process a single block without touching the error tracker.

        Args:
            block: Filled example block

        Returns:
            Tuple of (per-example gradients, per-example losses)
        """
        gradients = []
        losses = []

        for example in block:
            gradient, loss = self.model.compute_gradients(example.input, example.target)
            gradients.append(gradient)
            losses.append(float(loss))

        return gradients, losses

    def record_losses(self, losses: Sequence[float]) -> float:
        """Record every loss of a committed block and return the running mean."""
        mean_error = self.error_tracker.mean
        for loss in losses:
            mean_error = self.error_tracker.record(loss)
        return mean_error
