from typing import Optional


class DomainException(Exception):
    """Base exception for domain layer"""
    pass


class InvalidRequestError(DomainException):
    """Raised when a request cannot be processed as given"""
    pass


class AggregationError(DomainException):
    """Base class for query vector aggregation failures"""
    pass


class EmptyInputError(AggregationError):
    """Raised when aggregation is attempted with zero vectors"""
    pass


class DimensionMismatchError(AggregationError):
    """Raised when input vectors do not share one dimension"""
    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):
        super().__init__(message)
        self.index = index
        self.expected = expected
        self.actual = actual


class ZeroTotalWeightError(AggregationError):
    """Raised when the weight sequence sums to zero"""
    pass


class UpstreamFailureError(DomainException):
    """Raised when an external collaborator fails"""
    pass


class EmbeddingGenerationError(UpstreamFailureError):
    """Raised when embedding generation fails"""
    pass


class KeywordExtractionError(UpstreamFailureError):
    """Raised when keyword extraction fails"""
    pass


class VectorStoreError(UpstreamFailureError):
    """Raised when the vector store rejects a search or write"""
    pass
