from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.toast import Toast


class Assignment(BaseModel):
    assignment_id: str
    title: str
    description: Optional[str] = None
    created_at: datetime

    class Config:
        coerce_numbers_to_str = True


class AssignmentList(BaseModel):
    assignments: list[Assignment]


class AssignmentsRead(BaseModel):
    assignments: list[Assignment]
    toast: Optional[Toast] = None
