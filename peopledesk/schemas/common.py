"""
PeopleDesk - Common Response Schemas

Page envelope and summary shapes returned by every resource, whichever
data mode served the request.
"""

from decimal import Decimal
from typing import Dict, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


RecordT = TypeVar("RecordT")


class PageEnvelope(BaseModel, Generic[RecordT]):
    """
    One page of query results.

    Wire names follow the Spring page shape (number, size, first, last).
    """

    model_config = ConfigDict(populate_by_name=True)

    content: List[RecordT] = Field(default_factory=list)
    total_elements: int = Field(0, alias="totalElements", ge=0)
    total_pages: int = Field(0, alias="totalPages", ge=0)
    page_number: int = Field(0, alias="number", ge=0)
    page_size: int = Field(..., alias="size", ge=1)
    is_first: bool = Field(True, alias="first")
    is_last: bool = Field(True, alias="last")


class Summary(BaseModel):
    """Aggregate statistics over a filtered record set. Never stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_count: int = 0
    counts: Dict[str, int] = Field(default_factory=dict)
    groups: Dict[str, int] = Field(default_factory=dict)
    sums: Dict[str, Decimal] = Field(default_factory=dict)
    averages: Dict[str, Decimal] = Field(default_factory=dict)
