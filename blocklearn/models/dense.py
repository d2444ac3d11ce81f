"""
Layered dense network exposing the training loop's model boundary.

Gradients come from torch autograd; the loop only sees numpy arrays.
"""

from typing import List, Optional, Sequence, Tuple, Union
import logging

import numpy as np
import torch
import torch.nn.functional as F

from blocklearn.core.training.gradients import GradientSet, check_shapes

logger = logging.getLogger(__name__)


class DenseNetwork(torch.nn.Module):
    """
    Fully connected network with sigmoid activations.

    Every layer is a ``torch.nn.Linear``; layer ``l`` of a GradientSet
    holds the gradient of its ``weight`` (out x in) and ``bias`` (out).
    The loss is the mean squared error between output and target.
    """

    def __init__(
        self,
        input_neurons: int,
        hidden_neurons: Union[int, Sequence[int]],
        output_neurons: int,
        seed: Optional[int] = None,
    ):
        """
        Args:
            input_neurons: Size of the input vector
            hidden_neurons: Size of one hidden layer, or one size per hidden layer
            output_neurons: Size of the output vector
            seed: Seed for weight initialisation
        """
        super().__init__()
        if isinstance(hidden_neurons, int):
            hidden_neurons = [hidden_neurons]
        sizes = [input_neurons, *hidden_neurons, output_neurons]

        generator = torch.Generator()
        if seed is not None:
            generator.manual_seed(seed)

        self.layers = torch.nn.ModuleList()
        for n_in, n_out in zip(sizes[:-1], sizes[1:]):
            layer = torch.nn.Linear(n_in, n_out).double()
            bound = 1.0 / np.sqrt(n_in)
            with torch.no_grad():
                layer.weight.uniform_(-bound, bound, generator=generator)
                layer.bias.uniform_(-bound, bound, generator=generator)
            self.layers.append(layer)

        logger.debug(f"Built dense network with layer sizes {sizes}")

    @property
    def sizes(self) -> List[int]:
        return [self.layers[0].in_features] + [
            layer.out_features for layer in self.layers
        ]

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        for layer in self.layers:
            x = torch.sigmoid(layer(x))
        return x

    def _as_row(self, value) -> torch.Tensor:
        return torch.as_tensor(np.asarray(value, dtype=float)).reshape(1, -1)

    def predict(self, input) -> np.ndarray:
        with torch.no_grad():
            return self(self._as_row(input)).numpy().reshape(-1)

    def layer_count(self) -> int:
        return len(self.layers)

    def gradient_frame(self) -> GradientSet:
        return GradientSet(
            weights=[np.zeros(tuple(layer.weight.shape)) for layer in self.layers],
            biases=[np.zeros(tuple(layer.bias.shape)) for layer in self.layers],
        )

    def compute_gradients(self, input, target) -> Tuple[GradientSet, float]:
        """Gradient of the squared error for one example. Parameters are unchanged."""
        params = [p for layer in self.layers for p in (layer.weight, layer.bias)]
        output = self(self._as_row(input))
        loss = F.mse_loss(output, self._as_row(target))
        grads = torch.autograd.grad(loss, params)

        gradient = GradientSet(
            weights=[g.detach().numpy().copy() for g in grads[0::2]],
            biases=[g.detach().numpy().copy() for g in grads[1::2]],
        )
        return gradient, float(loss.item())

    def apply_update(self, update: GradientSet):
        """Subtract ``update`` from every weight and bias."""
        check_shapes(self.gradient_frame(), update, what="update")
        with torch.no_grad():
            for layer, weight, bias in zip(self.layers, update.weights, update.biases):
                layer.weight -= torch.as_tensor(weight, dtype=layer.weight.dtype)
                layer.bias -= torch.as_tensor(bias, dtype=layer.bias.dtype)
