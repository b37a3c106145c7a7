from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer


# Decimals travel as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> 'PaginationResponse':
        return cls(
            page=page,
            limit=limit,
            total=total,
            has_next=page * limit < total,
            has_prev=page > 1,
        )
