from typing import List

from pydantic import BaseModel

from pooltable.models.pool import PoolRecord


class TableResponse(BaseModel):
    id: str
    count: int
    rows: List[PoolRecord]
