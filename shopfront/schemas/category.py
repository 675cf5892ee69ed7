from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class ListCategoriesInput(BaseModel):
    page: int = 1
    limit: int = 6


class SaveUserInterestsInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category_ids: List[str]


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class CategoryPage(BaseModel):
    categories: List[CategoryRead] = Field(default_factory=list)
    pagination: Pagination
