from typing import Optional

from pydantic import BaseModel

from app.schemas.toast import Toast


class IdentityUpdate(BaseModel):
    name: str


class IdentityRead(BaseModel):
    name: str
    # set when the assignment load that follows name entry failed
    toast: Optional[Toast] = None


class SessionSummary(BaseModel):
    name: Optional[str] = None
    submitting: bool = False
    assignment_count: int = 0
    submission_count: int = 0
