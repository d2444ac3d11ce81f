"""
Training loop implementation.

Drives a model through mini-batch gradient descent with momentum: each
block pulls examples from a source, averages their gradients, folds the
average into the momentum accumulator and applies the result to the model.
"""

from gettext import gettext as _
from typing import Any, Callable, Optional, Sequence
import copy
import logging
import math

from blocklearn.utils.misc import try_tqdm

from .batch_processor import BlockProcessor
from .config import (
    LearnerConfig,
    check_accuracy,
    check_batch_size,
    check_error_memory,
    check_momentum,
)
from .error_tracker import ErrorTracker
from .errors import ConfigurationError, ShapeMismatchError
from .gradients import GradientAccumulator
from .model import Model
from .momentum import MomentumState
from .sources import (
    PROGRESS_EXAMPLES,
    CyclicSource,
    ExampleBlock,
    ExampleSource,
    Extractor,
    as_source,
)

logger = logging.getLogger(__name__)

BlockDoneCallback = Callable[[int, float], Any]
ContinuePredicate = Callable[[int, int, float], bool]


class TrainingLoop:
    """
    Mini-batch training loop with momentum and a rolling error estimate.

    One block runs these steps in order:

    1. Fill the example block from the source, then advance
       ``blocks_done`` by one and ``examples_done`` by the batch size
    2. Compute each example's gradient and loss
    3. Average the gradients of the block
    4. Fold the average into the momentum accumulator
    5. Apply the accumulator to the model (the block is committed here),
       then record the block's losses and update ``mean_error``
    6. Call ``on_block_done(blocks_done, mean_error)`` if set

    A failure before step 5 leaves the model, the momentum and the error
    history untouched, so the block can be retried without recording its
    losses twice. Only the progress counters have already advanced.

    ``learn_to_error`` and ``learn_while`` have no iteration cap: a
    threshold that is never reached, or a predicate that never turns
    false, loops forever. Bounding them is the caller's job.

    Momentum and error history belong to one loop; do not drive the same
    model from two loops at once.
    """

    def __init__(
        self,
        model: Model,
        config: Optional[LearnerConfig] = None,
        source: Optional[ExampleSource] = None,
        extractor: Optional[Extractor] = None,
        progress_mode: str = PROGRESS_EXAMPLES,
        on_block_done: Optional[BlockDoneCallback] = None,
    ):
        """
        Initialize training loop.

        Args:
            model: Model to train
            config: Hyperparameters, defaults to LearnerConfig(). The loop keeps
                its own copy, read back through ``loop.config``
            source: Example source used when a protocol is not given one
            extractor: Callback building an ExtractorSource (instead of source)
            progress_mode: Counter pair passed to the extractor,
                "examples" or "block_index"
            on_block_done: Called with (blocks_done, mean_error) after each block
        """
        self.config = copy.copy(config) if config is not None else LearnerConfig()
        self.source = as_source(source, extractor, progress_mode)
        self.on_block_done = on_block_done

        self.accumulator = GradientAccumulator()
        self.error_tracker = ErrorTracker(self.config.error_memory)
        self._block = ExampleBlock(self.config.batch_size)

        self.blocks_done = 0
        self.examples_done = 0
        self.mean_error = float("inf")

        self._model = None
        self.momentum_state = None
        self.processor = None
        self.model = model

    # ------------------------------------------------------------------
    # Bindings

    @property
    def model(self) -> Model:
        return self._model

    @model.setter
    def model(self, model: Model):
        """Bind a model; the momentum accumulator is rebuilt for its shape."""
        frame = model.gradient_frame()
        if frame.layer_count != model.layer_count():
            raise ShapeMismatchError(
                f"Gradient frame has {frame.layer_count} layers "
                f"but the model reports {model.layer_count()}"
            )
        if self.momentum_state is None:
            self.momentum_state = MomentumState(frame)
        else:
            self.momentum_state.reinitialize(frame)
        self._model = model
        self.processor = BlockProcessor(model, self.error_tracker)

    def set_extractor(self, extractor: Extractor, progress_mode: str = PROGRESS_EXAMPLES):
        self.source = as_source(extractor=extractor, progress=progress_mode)

    def reset_momentum(self):
        """Zero the momentum accumulator without touching the model."""
        self.momentum_state.reset()

    # ------------------------------------------------------------------
    # Hyperparameters

    @property
    def batch_size(self) -> int:
        return self.config.batch_size

    @batch_size.setter
    def batch_size(self, value: int):
        check_batch_size(value)
        self.config.batch_size = value
        self._block = ExampleBlock(value)

    @property
    def momentum(self) -> float:
        return self.config.momentum

    @momentum.setter
    def momentum(self, value: float):
        check_momentum(value)
        self.config.momentum = value

    @property
    def accuracy(self) -> float:
        return self.config.accuracy

    @accuracy.setter
    def accuracy(self, value: float):
        check_accuracy(value)
        self.config.accuracy = value

    @property
    def error_memory(self) -> int:
        return self.error_tracker.capacity

    @error_memory.setter
    def error_memory(self, value: int):
        """Resizing drops the recorded error history."""
        check_error_memory(value)
        self.config.error_memory = value
        self.error_tracker.resize(value)

    # ------------------------------------------------------------------
    # Single block

    def _require_source(self, source: Optional[ExampleSource]) -> ExampleSource:
        source = source if source is not None else self.source
        if source is None:
            raise ConfigurationError(
                "No example source bound: set an extractor or pass paired arrays"
            )
        return source

    def _sync_config(self) -> ExampleBlock:
        """Apply direct edits of ``self.config`` before a block starts."""
        config = self.config
        check_accuracy(config.accuracy)
        check_momentum(config.momentum, warn=False)
        if len(self._block) != config.batch_size:
            check_batch_size(config.batch_size)
            self._block = ExampleBlock(config.batch_size)
        if self.error_tracker.capacity != config.error_memory:
            check_error_memory(config.error_memory)
            self.error_tracker.resize(config.error_memory)
        return self._block

    def learn_one_block(self, source: Optional[ExampleSource] = None) -> float:
        """
        Run one block of training.

        Args:
            source: Overrides the bound source for this block

        Returns:
            Running mean error after the block
        """
        source = self._require_source(source)
        block = self._sync_config()

        source.fill(block, self.blocks_done, self.examples_done)
        self.blocks_done += 1
        self.examples_done += len(block)

        gradients, losses = self.processor.process_block(block)
        averaged = self.accumulator.aggregate(gradients)
        update = self.momentum_state.update(
            averaged, self.config.accuracy, self.config.momentum
        )
        self._model.apply_update(update)
        self.mean_error = self.processor.record_losses(losses)

        logger.debug(
            f"Block {self.blocks_done} done, "
            f"{self.examples_done} examples, mean error {self.mean_error:.6f}"
        )

        if self.on_block_done is not None:
            self.on_block_done(self.blocks_done, self.mean_error)

        return self.mean_error

    # ------------------------------------------------------------------
    # Stopping protocols

    def learn_blocks(self, count: int, source: Optional[ExampleSource] = None) -> float:
        """
        Run exactly ``count`` blocks.

        Returns:
            Running mean error after the last block
        """
        if count < 0:
            raise ConfigurationError(f"Block count cannot be negative, got {count}")
        source = self._require_source(source)

        logger.info(_("Learning {count} blocks").format(count=count))
        for _block in try_tqdm(
            range(count), enabled=self.config.progress, desc="Blocks"
        ):
            self.learn_one_block(source)
        return self.mean_error

    def learn_dataset(self, inputs: Sequence, targets: Sequence) -> float:
        """
        Run ``ceil(len(inputs) / batch_size)`` blocks over paired arrays.

        The walk starts at index 0 and wraps to the start when it reaches the
        end of the arrays, so the last block may reuse the first examples.
        """
        source = CyclicSource(inputs, targets)
        count = math.ceil(len(source) / self.config.batch_size)
        logger.info(
            _("Learning {examples} examples in {count} blocks").format(
                examples=len(source), count=count
            )
        )
        return self.learn_blocks(count, source=source)

    def learn_to_error(
        self, threshold: float, source: Optional[ExampleSource] = None
    ) -> float:
        """
        Run blocks until the running mean error is at or below ``threshold``.

        At least one block always runs. There is no iteration cap, and the
        running mean stays inflated by the warm-up sentinel until the error
        window has been filled once.
        """
        source = self._require_source(source)
        logger.info(_("Learning until mean error <= {threshold}").format(threshold=threshold))
        while self.learn_one_block(source) > threshold:
            pass
        logger.info(
            _("Reached mean error {error} after {blocks} blocks").format(
                error=self.mean_error, blocks=self.blocks_done
            )
        )
        return self.mean_error

    def learn_while(
        self,
        predicate: ContinuePredicate,
        inputs: Optional[Sequence] = None,
        targets: Optional[Sequence] = None,
    ) -> float:
        """
        Run blocks while ``predicate(blocks_done, examples_done, mean_error)``
        is true.

        The predicate is checked before every block, so a predicate that is
        false from the start runs nothing. When ``inputs`` and ``targets``
        are given they are walked cyclically instead of using the bound
        source.
        """
        if predicate is None:
            raise ConfigurationError("Condition function cannot be None")
        if inputs is not None or targets is not None:
            if inputs is None or targets is None:
                raise ConfigurationError("Pass both inputs and targets, or neither")
            source = CyclicSource(inputs, targets)
        else:
            source = self._require_source(None)

        while predicate(self.blocks_done, self.examples_done, self.mean_error):
            self.learn_one_block(source)
        return self.mean_error
