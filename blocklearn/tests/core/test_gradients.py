"""
Tests for GradientSet and GradientAccumulator.
"""

import numpy as np
import pytest

from blocklearn.core.training import (
    ConfigurationError,
    GradientAccumulator,
    GradientSet,
    ShapeMismatchError,
)
from blocklearn.tests.conftest import make_gradient_set

SHAPES = ((3, 2), (1, 3))


class TestGradientSet:
    def test_mismatched_layer_lists_rejected(self):
        with pytest.raises(ShapeMismatchError):
            GradientSet(weights=[np.zeros((1, 1))], biases=[])

    def test_zeros_like_keeps_shapes(self):
        gradient = make_gradient_set([1.0, 2.0], SHAPES)

        zeros = gradient.zeros_like()

        assert zeros.matches(gradient)
        assert all(not w.any() for w in zeros.weights)
        assert all(not b.any() for b in zeros.biases)

    def test_copy_is_independent(self):
        gradient = make_gradient_set(1.0, SHAPES)

        copy = gradient.copy()
        copy.weights[0] += 5.0

        assert gradient.weights[0][0, 0] == 1.0


class TestGradientAccumulator:
    def test_identical_gradients_average_to_themselves(self):
        gradient = make_gradient_set([0.25, -3.0], SHAPES)

        averaged = GradientAccumulator().aggregate([gradient] * 4)

        for layer in range(2):
            np.testing.assert_allclose(averaged.weights[layer], gradient.weights[layer])
            np.testing.assert_allclose(averaged.biases[layer], gradient.biases[layer])

    def test_arithmetic_mean_per_layer(self):
        gradients = [
            make_gradient_set([1.0, 10.0], SHAPES),
            make_gradient_set([3.0, 20.0], SHAPES),
        ]

        averaged = GradientAccumulator().aggregate(gradients)

        np.testing.assert_allclose(averaged.weights[0], np.full((3, 2), 2.0))
        np.testing.assert_allclose(averaged.biases[1], np.full(1, 15.0))

    def test_inputs_are_not_mutated(self):
        gradients = [make_gradient_set(1.0, SHAPES), make_gradient_set(3.0, SHAPES)]

        GradientAccumulator().aggregate(gradients)

        assert gradients[0].weights[0][0, 0] == 1.0
        assert gradients[1].weights[0][0, 0] == 3.0

    def test_shape_mismatch_is_fatal(self):
        gradients = [
            make_gradient_set(1.0, SHAPES),
            make_gradient_set(1.0, ((3, 2), (2, 3))),
        ]

        with pytest.raises(ShapeMismatchError):
            GradientAccumulator().aggregate(gradients)

    def test_layer_count_mismatch_is_fatal(self):
        gradients = [make_gradient_set(1.0, SHAPES), make_gradient_set(1.0, SHAPES[:1])]

        with pytest.raises(ShapeMismatchError):
            GradientAccumulator().aggregate(gradients)

    def test_empty_block_rejected(self):
        with pytest.raises(ConfigurationError):
            GradientAccumulator().aggregate([])
