from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.timeslots import normalize_time


TimetableScope = Literal[
    "class",
    "teacher",
]


class TimetableEntryIn(BaseModel):
    """
    Create when id is absent, otherwise replace every mutable field of entry `id`.
    Required-ness (subject / day / times, class or teacher) is checked by the store
    so that rejections come back in a fixed order.
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    class_id: Optional[int] = None
    teacher_id: Optional[int] = None
    subject: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=1, le=7, description="1=Mon .. 7=Sun")
    start_time: Optional[str] = Field(default=None, description="HH:MM, 24h")
    end_time: Optional[str] = Field(default=None, description="HH:MM, 24h")
    room: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalize_time(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("time must be a string in HH:MM format")
        return normalize_time(v)

    @field_validator("subject", "room")
    @classmethod
    def _strip_text(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class TimetableEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    class_id: Optional[int] = None
    teacher_id: Optional[int] = None
    subject: str
    day_of_week: int
    start_time: str
    end_time: str
    room: Optional[str] = None

    # roster display names, filled by list queries
    class_name: Optional[str] = None
    teacher_name: Optional[str] = None


class CopyDayIn(BaseModel):
    from_day: int = Field(ge=1, le=7)
    to_day: int = Field(ge=1, le=7)
    scope: TimetableScope
    scope_id: int


class CopyWeekIn(BaseModel):
    from_class_id: int
    to_class_id: int


class CopyResultOut(BaseModel):
    created: int = 0
    skipped: int = 0


class DeleteResultOut(BaseModel):
    success: bool = True
