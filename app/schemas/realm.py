"""Pydantic schemas for the realm catalog."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class LessonSchema(BaseModel):
    id: str
    title: str
    content: str
    type: str
    duration: int

    class Config:
        from_attributes = True


class RealmOutSchema(BaseModel):
    id: str
    name: str
    description: str
    ordinal: int
    lesson_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RealmDetailSchema(BaseModel):
    id: str
    name: str
    description: str
    ordinal: int
    lessons: list[LessonSchema]

    class Config:
        from_attributes = True
