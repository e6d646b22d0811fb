"""
Utilities for combining several keyword embeddings into one query vector.

Keywords extracted from a query are ordered most-salient first, so each
embedding is weighted by a geometric decay over its position and the
vectors are averaged with those weights.
"""
import logging
from typing import List, Sequence

from ..domain.exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    ZeroTotalWeightError,
)

logger = logging.getLogger(__name__)

DEFAULT_DECAY_RATE = 0.8


def decay_weights(count: int, decay_rate: float = DEFAULT_DECAY_RATE) -> List[float]:
    """
    Positional weights for `count` items: decay_rate ** i for i in 0..count-1.

    The first weight is always 1.0. The decay rate is not range-checked;
    rates outside (0, 1] are legal and change what the aggregate means.

    Args:
        count: Number of weights to produce
        decay_rate: Ratio between consecutive weights

    Returns:
        List of `count` weights, empty when count is 0
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return [decay_rate ** i for i in range(count)]


def _check_dimensions(vectors: Sequence[Sequence[float]]) -> int:
    expected = len(vectors[0])
    for index, vector in enumerate(vectors):
        if len(vector) != expected:
            raise DimensionMismatchError(
                f"Vector at index {index} has {len(vector)} dimensions, expected {expected}",
                index=index,
                expected=expected,
                actual=len(vector),
            )
    return expected


def aggregate_vectors(
    vectors: Sequence[Sequence[float]],
    weights: Sequence[float],
) -> List[float]:
    """
    Weighted arithmetic mean of equal-dimension vectors.

    Vectors and weights are paired by index with zip, so if the sequences
    differ in length only the overlapping prefix is combined and the
    normalising sum covers only the paired weights. Components are
    accumulated left to right to keep float rounding reproducible.

    Args:
        vectors: Embedding vectors, all of one dimension
        weights: One weight per vector

    Returns:
        The aggregated vector

    Raises:
        EmptyInputError: no vectors, or nothing left after pairing
        DimensionMismatchError: vectors of differing lengths
        ZeroTotalWeightError: paired weights sum to zero
    """
    if not vectors:
        raise EmptyInputError("Cannot aggregate an empty vector sequence")

    dimensions = _check_dimensions(vectors)

    pairs = list(zip(vectors, weights))
    if not pairs:
        raise EmptyInputError("No vector/weight pairs to aggregate")
    if len(vectors) != len(weights):
        logger.warning(
            "Aggregating %d vectors with %d weights; only the first %d pairs are used",
            len(vectors), len(weights), len(pairs),
        )

    total_weight = 0.0
    for _, weight in pairs:
        total_weight += weight
    if total_weight == 0.0:
        raise ZeroTotalWeightError("Weights sum to zero; cannot normalise the aggregate")

    accumulator = [0.0] * dimensions
    for vector, weight in pairs:
        for j in range(dimensions):
            accumulator[j] += weight * vector[j]

    return [component / total_weight for component in accumulator]
