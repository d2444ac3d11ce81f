"""
Core training module - Mini-batch training components.

This module provides the pieces of a momentum-smoothed mini-batch
training loop. They can be used on their own or through TrainingLoop.
"""

from .loop import TrainingLoop
from .batch_processor import BlockProcessor
from .config import LearnerConfig
from .error_tracker import ErrorTracker
from .errors import ConfigurationError, ShapeMismatchError
from .gradients import GradientAccumulator, GradientSet
from .model import Model
from .momentum import MomentumState
from .sources import (
    CyclicSource,
    ExampleBlock,
    ExampleSource,
    ExtractorSource,
    TrainingExample,
)

__all__ = [
    "TrainingLoop",
    "BlockProcessor",
    "LearnerConfig",
    "ErrorTracker",
    "ConfigurationError",
    "ShapeMismatchError",
    "GradientAccumulator",
    "GradientSet",
    "Model",
    "MomentumState",
    "CyclicSource",
    "ExampleBlock",
    "ExampleSource",
    "ExtractorSource",
    "TrainingExample",
]
