from enum import Enum
from typing import Any, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RelationalOperator(str, Enum):
    EQUALS = "Equals"
    NOT_EQUALS = "NotEquals"
    GREATER_THAN = "GreaterThan"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESS_THAN = "LessThan"
    LESS_OR_EQUAL = "LessOrEqual"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"


TEXT_OPERATORS = frozenset(
    {RelationalOperator.CONTAINS, RelationalOperator.STARTS_WITH, RelationalOperator.ENDS_WITH}
)


class PaginationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_number: int = Field(default=1, ge=0)
    page_size: int = Field(default=25, gt=0)

    @property
    def offset(self) -> int:
        # Page 0 is served as the first page.
        return max(self.page_number - 1, 0) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class SortRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    by: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC


class QuickSearch(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    field_names: Tuple[str, ...] = ()


class FieldFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    values: Tuple[str, ...] = Field(min_length=1)
    operator: RelationalOperator


class FilterSpecification(BaseModel):
    model_config = ConfigDict(frozen=True)

    pagination: PaginationRequest = PaginationRequest()
    sort: SortRequest
    quick_search: Optional[QuickSearch] = None
    filters: Tuple[FieldFilter, ...] = ()


class PagedResult(BaseModel, Generic[T]):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[T]
    total_count: int
    page_number: int
    page_size: int
    sort: SortRequest

    @computed_field
    @property
    def page_count(self) -> int:
        if self.total_count <= 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size

    def map_items(self, serializer) -> "PagedResult[Any]":
        return PagedResult[Any](
            items=[serializer(item) for item in self.items],
            total_count=self.total_count,
            page_number=self.page_number,
            page_size=self.page_size,
            sort=self.sort,
        )
