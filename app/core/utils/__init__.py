"""Core utilities"""
from .vector_aggregation import (
    aggregate_vectors,
    decay_weights,
    DEFAULT_DECAY_RATE,
)

__all__ = [
    "aggregate_vectors",
    "decay_weights",
    "DEFAULT_DECAY_RATE",
]
