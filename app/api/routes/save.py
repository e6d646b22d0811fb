from typing import Optional, List
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...api.deps import get_save_values_use_case
from ...api.errors import ResultData
from ...core.use_cases.save_values import SaveValuesUseCase
from ...core.domain.entities.search import SaveRequest

router = APIRouter()


class PayloadRequest(BaseModel):
    key: str = Field(..., min_length=1)
    value: List[str] = Field(..., min_length=1)
    # Accepted for compatibility with search payloads; unused when saving
    limit: Optional[int] = None


class SaveResponse(BaseModel):
    key: str
    ids: List[str]


@router.post("", response_model=ResultData[SaveResponse])
async def save_values(
    body: PayloadRequest,
    use_case: SaveValuesUseCase = Depends(get_save_values_use_case)
):
    """
    Embed each value and store it under `key`.
    """
    result = await use_case.save(SaveRequest(key=body.key, values=body.value))
    return ResultData.ok(SaveResponse(key=result.key, ids=result.ids))
