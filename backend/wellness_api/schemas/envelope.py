from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class PageRef(BaseModel):
    page: int
    limit: int

class Pagination(BaseModel):
    total: int | None = None
    next: PageRef | None = None
    prev: PageRef | None = None

class Envelope(BaseModel, Generic[T]):
    """Every response body: ``{success, message?, data?, count?, pagination?}``."""
    success: bool = True
    message: str | None = None
    data: T | None = None
    count: int | None = None
    pagination: Pagination | None = None
