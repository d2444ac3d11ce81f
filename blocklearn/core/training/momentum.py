"""
Momentum accumulator carried across blocks.
"""

import logging

from .gradients import GradientSet, check_shapes

logger = logging.getLogger(__name__)


class MomentumState:
    """
    Model-shaped accumulator updated once per block.

    Each update computes, per layer and per parameter kind::

        state = averaged / accuracy + state * momentum

    This is not a normalised moving average: ``accuracy`` scales the fresh
    gradient down and ``momentum`` keeps an unnormalised share of the
    previous direction. With ``momentum >= 1`` the state grows without
    bound.

    The value returned by ``update`` is both the step applied to the model
    and the accumulator used for the next block. Copy it before mutating.
    """

    def __init__(self, frame: GradientSet):
        """
        Args:
            frame: Zero-filled GradientSet shaped like the model
        """
        self.state = frame.zeros_like()

    @property
    def layer_count(self) -> int:
        return self.state.layer_count

    def reinitialize(self, frame: GradientSet):
        """Rebind to a (possibly different) topology, dropping all history."""
        logger.debug(f"Reinitializing momentum for {frame.layer_count} layers")
        self.state = frame.zeros_like()

    def reset(self):
        """Zero the accumulator in place, keeping its shape."""
        for layer in range(self.state.layer_count):
            self.state.weights[layer].fill(0.0)
            self.state.biases[layer].fill(0.0)

    def update(
        self, averaged: GradientSet, accuracy: float, momentum: float
    ) -> GradientSet:
        """
        Fold a block-averaged gradient into the accumulator.

        Shapes are checked before anything is written, so a mismatch leaves
        the previous state intact.

        Returns:
            The stored state (not a copy)
        """
        check_shapes(self.state, averaged, what="averaged gradient")

        weights = [
            averaged.weights[layer] / accuracy + self.state.weights[layer] * momentum
            for layer in range(self.state.layer_count)
        ]
        biases = [
            averaged.biases[layer] / accuracy + self.state.biases[layer] * momentum
            for layer in range(self.state.layer_count)
        ]

        for layer in range(self.state.layer_count):
            self.state.weights[layer][...] = weights[layer]
            self.state.biases[layer][...] = biases[layer]

        return self.state
