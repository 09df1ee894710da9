from datetime import datetime

from pydantic import BaseModel, field_validator

from omnitrackr.utils.sanitization import sanitize_string


class ActivityCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    category_id: int | None = None
    tag_ids: list[int] | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class ActivityUpdate(ActivityCreate):
    """Patch body. ``model_fields_set`` tells an omitted field from an explicit null."""


class ActivityTag(BaseModel):
    id: int
    name: str
    color: str

    class Config:
        from_attributes = True


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    category_id: int | None = None
    category_name: str | None = None
    category_color: str | None = None
    title: str
    description: str = ""
    tag_ids: list[int] = []
    tags: list[ActivityTag] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, activity) -> "ActivityResponse":
        category = activity.category
        return cls(
            id=activity.id,
            user_id=activity.user_id,
            category_id=activity.category_id,
            category_name=category.name if category else None,
            category_color=category.color if category else None,
            title=activity.title,
            description=activity.description or "",
            tag_ids=[t.id for t in activity.tags],
            tags=[ActivityTag.model_validate(t) for t in activity.tags],
            created_at=activity.created_at,
            updated_at=activity.updated_at,
        )
