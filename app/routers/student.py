from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import MSG_FEEDBACK_RECEIVED, MSG_SUBMITTED
from app.core.deps import get_student_session
from app.core.errors import NetworkError
from app.schemas.assignment import Assignment, AssignmentsRead
from app.schemas.identity import IdentityRead, IdentityUpdate, SessionSummary
from app.schemas.submission import SubmissionCreate, SubmissionRecord, SubmissionResult
from app.schemas.toast import Toast
from app.services.student_session import StudentSession

router = APIRouter()


def _error_toast(message: str | None) -> Toast | None:
    return Toast(message=message, type="error") if message else None


@router.get("", response_model=SessionSummary)
def session_summary(session: StudentSession = Depends(get_student_session)):
    return session.summary()


@router.get(
    "/identity",
    response_model=IdentityRead,
    responses={404: {"description": "No name entered yet"}},
)
def read_identity(session: StudentSession = Depends(get_student_session)):
    if not session.identity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No name entered yet")
    return IdentityRead(name=session.identity, toast=_error_toast(session.take_pending_error()))


@router.put(
    "/identity",
    response_model=IdentityRead,
    responses={422: {"description": "Name is empty"}},
)
def update_identity(
    payload: IdentityUpdate,
    session: StudentSession = Depends(get_student_session),
):
    name = session.set_identity(payload.name)
    return IdentityRead(name=name, toast=_error_toast(session.take_pending_error()))


@router.get("/assignments", response_model=list[Assignment])
def list_assignments(session: StudentSession = Depends(get_student_session)):
    session.require_identity()
    return session.assignments


@router.post("/assignments/reload", response_model=AssignmentsRead)
def reload_assignments(session: StudentSession = Depends(get_student_session)):
    # a failed reload still answers with the list already on screen
    try:
        assignments = session.load_assignments()
    except NetworkError as exc:
        return AssignmentsRead(assignments=session.assignments, toast=_error_toast(exc.message))
    return AssignmentsRead(assignments=assignments)


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Another submission is in progress"},
        422: {"description": "Submission content is empty"},
        502: {"description": "Grading API rejected or did not answer"},
    },
)
def submit_assignment(
    assignment_id: str,
    payload: SubmissionCreate,
    session: StudentSession = Depends(get_student_session),
):
    record = session.submit(assignment_id, payload.content)
    return SubmissionResult(submission=record, toast=Toast(message=MSG_SUBMITTED))


@router.get("/submissions", response_model=list[SubmissionRecord])
def my_submissions(session: StudentSession = Depends(get_student_session)):
    session.require_identity()
    return session.ledger.records()


@router.post(
    "/submissions/{submission_id}/refresh",
    response_model=SubmissionResult,
    responses={
        404: {"description": "Submission not in the local ledger"},
        502: {"description": "Grading API did not answer"},
    },
)
def refresh_submission(
    submission_id: str,
    session: StudentSession = Depends(get_student_session),
):
    record, became_evaluated = session.refresh(submission_id)
    toast = Toast(message=MSG_FEEDBACK_RECEIVED) if became_evaluated else None
    return SubmissionResult(submission=record, toast=toast)
