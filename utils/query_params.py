# utils/query_params.py

from typing import List, Optional, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")


class QueryParams(BaseModel):
    limit: Optional[int] = Field(None, ge=1, le=200)
    offset: Optional[int] = Field(None, ge=0)

    def slice(self, items: Sequence[ItemT]) -> List[ItemT]:
        """Pagination window over results filtered in Python."""
        start = self.offset or 0
        end = start + self.limit if self.limit is not None else None
        return list(items[start:end])


def query_params(
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: Optional[int] = Query(None, ge=0),
) -> QueryParams:
    return QueryParams(limit=limit, offset=offset)
