from datetime import datetime

from pydantic import BaseModel, field_validator

from omnitrackr.utils.sanitization import sanitize_string, validate_color


class CategoryCreate(BaseModel):
    name: str | None = None
    color: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("color")
    @classmethod
    def check_color(cls, v):
        return validate_color(v)


class CategoryUpdate(CategoryCreate):
    """Patch body: only the fields the client sent are applied."""


class CategoryResponse(BaseModel):
    id: int
    user_id: int
    name: str
    color: str
    activity_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
