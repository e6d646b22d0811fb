"""
Unit tests for domain exceptions.

Tests cover:
- Exception hierarchy
- Custom exception attributes
"""

import pytest

from app.core.domain.exceptions import (
    DomainException,
    InvalidRequestError,
    AggregationError,
    EmptyInputError,
    DimensionMismatchError,
    ZeroTotalWeightError,
    UpstreamFailureError,
    EmbeddingGenerationError,
    KeywordExtractionError,
    VectorStoreError,
)


class TestDomainExceptionHierarchy:
    """Tests for exception hierarchy."""

    @pytest.mark.parametrize("exc_class", [
        InvalidRequestError,
        AggregationError,
        EmptyInputError,
        DimensionMismatchError,
        ZeroTotalWeightError,
        UpstreamFailureError,
        EmbeddingGenerationError,
        KeywordExtractionError,
        VectorStoreError,
    ])
    def test_all_exceptions_inherit_from_domain_exception(self, exc_class):
        assert issubclass(exc_class, DomainException)

    @pytest.mark.parametrize("exc_class", [EmptyInputError, DimensionMismatchError, ZeroTotalWeightError])
    def test_aggregation_errors(self, exc_class):
        assert issubclass(exc_class, AggregationError)

    @pytest.mark.parametrize("exc_class", [EmbeddingGenerationError, KeywordExtractionError, VectorStoreError])
    def test_upstream_failures(self, exc_class):
        assert issubclass(exc_class, UpstreamFailureError)


class TestDimensionMismatchError:

    def test_carries_offending_index(self):
        error = DimensionMismatchError("bad vector", index=2, expected=384, actual=768)

        assert str(error) == "bad vector"
        assert error.index == 2
        assert error.expected == 384
        assert error.actual == 768

    def test_details_optional(self):
        error = DimensionMismatchError("bad vector")

        assert error.index is None
