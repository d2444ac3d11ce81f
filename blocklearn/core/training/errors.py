"""
Errors raised by the training core.

Both derive from ValueError so callers that already guard against bad
arguments keep working.
"""


class ConfigurationError(ValueError):
    """Invalid hyperparameter, missing data source or mismatched dataset."""


class ShapeMismatchError(ValueError):
    """Gradient or momentum layers do not match the bound model topology."""
