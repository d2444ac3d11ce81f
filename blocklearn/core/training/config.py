"""
Hyperparameters of the training loop.
"""

from dataclasses import dataclass, fields
from gettext import gettext as _
import logging
import math
import numbers

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "true", "yes", "on")


@dataclass
class LearnerConfig:
    """
    Training loop configuration.

    Attributes:
        batch_size: Examples averaged per parameter update (>= 1)
        momentum: Share of the previous update carried forward (>= 0).
            Values >= 1 make the accumulator grow without bound; they are
            accepted but logged as a warning.
        accuracy: Divisor applied to the fresh block gradient (> 0).
            Larger values mean smaller steps.
        error_memory: Window of the running mean error (>= 0, 0 disables
            averaging)
        progress: Show a tqdm progress bar for counted runs
    """

    batch_size: int = 5
    momentum: float = 0.1
    accuracy: float = 10.0
    error_memory: int = 10
    progress: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        check_batch_size(self.batch_size)
        check_momentum(self.momentum)
        check_accuracy(self.accuracy)
        check_error_memory(self.error_memory)

    @classmethod
    def from_cfg(cls, cfg) -> "LearnerConfig":
        """
        Build from a mapping such as an EasyDict.

        Unknown keys are ignored. String values (as set from environment
        variables) are converted to the field type.
        """
        kwargs = {}
        for f in fields(cls):
            if f.name not in cfg or cfg[f.name] is None:
                continue
            kwargs[f.name] = _coerce(f.type, cfg[f.name], f.name)
        return cls(**kwargs)


def _coerce(kind, value, name: str):
    if kind is bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid value for {name}: {value!r} ({e})"
        ) from e


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_batch_size(value: int):
    if not _is_int(value) or value < 1:
        raise ConfigurationError(f"Batch size must be an integer >= 1, got {value}")


def _is_finite_real(value) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def check_momentum(value: float, warn: bool = True):
    if not _is_finite_real(value):
        raise ConfigurationError(f"Momentum must be a finite number, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"Momentum cannot be lower than zero, got {value}")
    if warn and value >= 1:
        logger.warning(
            _(
                "Momentum {momentum} is >= 1, accumulated updates will grow without bound"  # noqa:E501
            ).format(momentum=value)
        )


def check_accuracy(value: float):
    if not _is_finite_real(value):
        raise ConfigurationError(f"Accuracy must be a finite number, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"Accuracy must be greater than zero, got {value}")


def check_error_memory(value: int):
    if not _is_int(value) or value < 0:
        raise ConfigurationError(
            f"Error memory length must be an integer >= 0, got {value}"
        )
