import math

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class MessageResponse(BaseModel):
    message: str
