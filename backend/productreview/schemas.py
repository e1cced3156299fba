from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, TypeVar
import math

T = TypeVar('T')


class APIModel(BaseModel):
    """Base for wire schemas: camelCase JSON, snake_case attributes, readable from ORM rows."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Page(APIModel, Generic[T]):
    """One page of a sorted, filtered listing."""
    content: List[T]
    page: int  # 0-based
    size: int
    total_elements: int
    total_pages: int
    last: bool

    @classmethod
    def of(cls, content, page, size, total_elements):
        total_pages = math.ceil(total_elements / size) if size else 0
        return cls(
            content=list(content),
            page=page,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            last=page >= total_pages - 1,
        )
