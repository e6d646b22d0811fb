from typing import Optional, List, Dict, Any
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...api.deps import get_search_values_use_case
from ...api.errors import ResultData
from ...core.use_cases.search_values import SearchValuesUseCase
from ...core.domain.entities.search import ScoredResult, SearchRequest

router = APIRouter()


class SearchResultItem(BaseModel):
    id: str
    score: float
    payload: Dict[str, Any]


def to_result_item(result: ScoredResult) -> SearchResultItem:
    return SearchResultItem(
        id=result.id,
        score=result.score,
        payload=result.metadata,
    )


@router.get("", response_model=ResultData[List[SearchResultItem]])
async def search_values(
    key: str = Query(..., min_length=1),
    value: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, gt=0),
    use_case: SearchValuesUseCase = Depends(get_search_values_use_case)
):
    """
    Search values stored under `key` that are semantically close to `value`.
    """
    results = await use_case.search(SearchRequest(key=key, value=value, limit=limit))
    return ResultData.ok([to_result_item(r) for r in results])
