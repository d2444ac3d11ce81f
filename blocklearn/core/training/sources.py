"""
Example sources feeding the training loop.

A source fills a reusable ExampleBlock with (input, target) pairs. Two
kinds exist: a pull-based extractor callback and a cyclic walk over
pre-supplied paired arrays.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Extractor = Callable[[int, int], Tuple[Any, Any]]

PROGRESS_EXAMPLES = "examples"
PROGRESS_BLOCK_INDEX = "block_index"


@dataclass
class TrainingExample:
    """A single (input, target) pair."""

    input: Any = None
    target: Any = None


class ExampleBlock:
    """
    Fixed-size sequence of TrainingExample slots.

    Slots are allocated once and overwritten every block.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ConfigurationError(f"Block size must be at least 1, got {size}")
        self._examples: List[TrainingExample] = [
            TrainingExample() for _ in range(size)
        ]

    def __len__(self):
        return len(self._examples)

    def __iter__(self):
        return iter(self._examples)

    def __getitem__(self, index: int) -> TrainingExample:
        return self._examples[index]

    def put(self, index: int, input, target):
        example = self._examples[index]
        example.input = input
        example.target = target


class ExampleSource:
    """Provides the examples of the next block."""

    def fill(self, block: ExampleBlock, blocks_done: int, examples_done: int):
        """
        Overwrite every slot of ``block`` in index order.

        Args:
            block: Buffer to fill
            blocks_done: Blocks completed before this one
            examples_done: Examples accepted before this block
        """
        raise NotImplementedError


class ExtractorSource(ExampleSource):
    """
    Pulls each example from a callback.

    With ``progress="examples"`` the callback receives
    ``(blocks_done, examples_done)``, both as they stood when the block
    started. With ``progress="block_index"`` it receives
    ``(blocks_done, index_within_block)``.
    """

    def __init__(self, extractor: Extractor, progress: str = PROGRESS_EXAMPLES):
        if extractor is None:
            raise ConfigurationError("Example extractor cannot be None")
        if progress not in (PROGRESS_EXAMPLES, PROGRESS_BLOCK_INDEX):
            raise ConfigurationError(
                f"Unknown progress mode {progress!r}, expected "
                f"{PROGRESS_EXAMPLES!r} or {PROGRESS_BLOCK_INDEX!r}"
            )
        self.extractor = extractor
        self.progress = progress

    def fill(self, block: ExampleBlock, blocks_done: int, examples_done: int):
        for index in range(len(block)):
            if self.progress == PROGRESS_EXAMPLES:
                input, target = self.extractor(blocks_done, examples_done)
            else:
                input, target = self.extractor(blocks_done, index)
            block.put(index, input, target)


class CyclicSource(ExampleSource):
    """
    Walks paired input/target arrays, wrapping to the start at the end.

    The dataset repeats indefinitely, so any number of blocks can be drawn.
    """

    def __init__(self, inputs: Sequence, targets: Sequence):
        if len(inputs) != len(targets):
            raise ConfigurationError(
                "Both input and expected output must be of the same length "
                f"({len(inputs)} != {len(targets)})"
            )
        if len(inputs) == 0:
            raise ConfigurationError("Cannot cycle over an empty dataset")
        self.inputs = inputs
        self.targets = targets
        self.cursor = 0
        self.wraps = 0

    def __len__(self):
        return len(self.inputs)

    def rewind(self):
        self.cursor = 0
        self.wraps = 0

    def fill(self, block: ExampleBlock, blocks_done: int, examples_done: int):
        for index in range(len(block)):
            block.put(index, self.inputs[self.cursor], self.targets[self.cursor])
            self.cursor += 1
            if self.cursor >= len(self.inputs):
                self.cursor = 0
                self.wraps += 1


def as_source(
    source: Optional[ExampleSource] = None,
    extractor: Optional[Extractor] = None,
    progress: str = PROGRESS_EXAMPLES,
) -> Optional[ExampleSource]:
    """Build a source from either an ExampleSource or an extractor callback."""
    if source is not None and extractor is not None:
        raise ConfigurationError("Pass either a source or an extractor, not both")
    if extractor is not None:
        return ExtractorSource(extractor, progress=progress)
    return source
