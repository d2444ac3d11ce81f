"""
Test fixtures and utilities for blocklearn tests.

Provides stub models with predictable gradients and losses.
"""

import numpy as np
import pytest

from blocklearn.core.training import GradientSet, LearnerConfig


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: tests that run a real torch model"
    )


def make_gradient_set(values, shapes=((1, 1),)):
    """GradientSet with every weight and bias of layer ``l`` set to values[l]."""
    if np.isscalar(values):
        values = [values] * len(shapes)
    return GradientSet(
        weights=[np.full(shape, float(v)) for shape, v in zip(shapes, values)],
        biases=[np.full(shape[0], float(v)) for shape, v in zip(shapes, values)],
    )


class StubModel:
    """
    Model returning the same gradient and loss for every example.

    Parameters start at zero; applied updates are subtracted and kept in
    ``updates`` for inspection.
    """

    def __init__(self, shapes=((1, 1),), gradient=1.0, loss=1.0):
        self.shapes = tuple(shapes)
        self.gradient = gradient
        self.loss = loss
        self.weights = [np.zeros(shape) for shape in self.shapes]
        self.biases = [np.zeros(shape[0]) for shape in self.shapes]
        self.updates = []
        self.seen = []

    def layer_count(self):
        return len(self.shapes)

    def gradient_frame(self):
        return make_gradient_set(0.0, self.shapes)

    def current_loss(self):
        return self.loss

    def compute_gradients(self, input, target):
        self.seen.append((input, target))
        return make_gradient_set(self.gradient, self.shapes), self.current_loss()

    def apply_update(self, update):
        self.updates.append(update.copy())
        for layer in range(self.layer_count()):
            self.weights[layer] -= update.weights[layer]
            self.biases[layer] -= update.biases[layer]


class DecreasingLossModel(StubModel):
    """Loss drops by ``step`` after every applied update."""

    def __init__(self, start=1.0, step=0.1, **kwargs):
        super().__init__(**kwargs)
        self.start = start
        self.step = step

    def current_loss(self):
        return self.start - self.step * len(self.updates)


def constant_extractor(blocks_done, counter):
    return np.array([float(blocks_done)]), np.array([float(counter)])


@pytest.fixture
def stub_model():
    return StubModel()


@pytest.fixture
def two_layer_model():
    return StubModel(shapes=((3, 2), (1, 3)), gradient=2.0, loss=0.5)


@pytest.fixture
def simple_config():
    """Batch of 2, no momentum, unit accuracy."""
    return LearnerConfig(batch_size=2, momentum=0.0, accuracy=1.0)
