"""Common schema utilities."""

from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dorehami.timeutils import to_utc

T = TypeVar("T")

# Aware UTC instant; naive inputs are read as UTC
UTCDateTime = Annotated[datetime, AfterValidator(to_utc)]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class PaginatedResponse(BaseSchema, Generic[T]):
    """Paginated response wrapper."""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class SuccessResponse(BaseSchema):
    """Simple success response."""

    success: bool = True
    message: str
