import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.domain.exceptions import (
    DomainException,
    InvalidRequestError,
    EmptyInputError,
    DimensionMismatchError,
    ZeroTotalWeightError,
    EmbeddingGenerationError,
    KeywordExtractionError,
    VectorStoreError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultData(BaseModel, Generic[T]):
    """Response envelope shared by every endpoint"""
    data: Optional[T] = None
    msg: str = ""
    success: bool = True

    @classmethod
    def ok(cls, data: Any) -> "ResultData":
        return cls(data=data, msg="", success=True)

    @classmethod
    def failure(cls, msg: str) -> "ResultData":
        return cls(data=None, msg=msg, success=False)


ERROR_STATUS_MAP: Dict[Type[DomainException], int] = {
    InvalidRequestError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EmptyInputError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DimensionMismatchError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ZeroTotalWeightError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    EmbeddingGenerationError: status.HTTP_502_BAD_GATEWAY,
    KeywordExtractionError: status.HTTP_502_BAD_GATEWAY,
    VectorStoreError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainException) -> int:
    """HTTP status for an error kind, most specific mapped class wins"""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")
    body = ResultData.failure(str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())
