from pydantic import BaseModel


class OverviewStats(BaseModel):
    total_activities: int
    total_categories: int
    total_tags: int


class CategoryCount(BaseModel):
    category_id: int | None
    category_name: str
    category_color: str
    activity_count: int


class TagCount(BaseModel):
    tag_id: int
    tag_name: str
    tag_color: str
    activity_count: int


class TimelinePoint(BaseModel):
    date: str
    count: int
