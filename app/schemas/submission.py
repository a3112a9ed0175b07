from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.toast import Toast

# Known grading states. The grading API owns the set, so status stays a plain
# string and unknown values are stored as reported.
PENDING = "pending"
EVALUATED = "evaluated"


class Feedback(BaseModel):
    score: int = Field(ge=0, le=100)
    plagiarism_risk: str
    feedback_summary: str


class SubmissionCreate(BaseModel):
    content: str


class SubmissionCreated(BaseModel):
    submission_id: str

    class Config:
        coerce_numbers_to_str = True


class SubmissionStatusRead(BaseModel):
    status: str
    feedback: Optional[Feedback] = None


class SubmissionRecord(BaseModel):
    submission_id: str
    assignment_id: str
    assignment_title: str
    submitted_at: datetime
    status: str = PENDING
    feedback: Optional[Feedback] = None

    class Config:
        coerce_numbers_to_str = True


class SubmissionResult(BaseModel):
    submission: SubmissionRecord
    toast: Optional[Toast] = None
