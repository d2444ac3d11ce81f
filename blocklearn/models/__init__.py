from .dense import DenseNetwork

__all__ = ["DenseNetwork"]
