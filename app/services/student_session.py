import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from app.core.config import (
    MSG_CONTENT_REQUIRED,
    MSG_LOAD_FAILED,
    MSG_NAME_REQUIRED,
    MSG_REFRESH_FAILED,
    MSG_SUBMIT_FAILED,
    MSG_SUBMIT_IN_FLIGHT,
)
from app.core.errors import (
    AssignmentNotFound,
    IdentityRequired,
    NetworkError,
    SubmissionInFlight,
    ValidationError,
)
from app.schemas.assignment import Assignment
from app.schemas.identity import SessionSummary
from app.schemas.submission import SubmissionRecord
from app.services.grading_api import GradingApi
from app.services.identity_store import IdentityStore
from app.services.ledger import SubmissionLedger

logger = logging.getLogger(__name__)


class StudentSession:
    """
    Everything one student's dashboard needs between requests.

    Holds the current identity, the last assignment list fetched from the
    grading API, the submission ledger and the submit in-flight flag.
    Created once per process and shared through `app.core.deps`.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        ledger: SubmissionLedger,
        api: GradingApi,
    ):
        self.identity_store = identity_store
        self.ledger = ledger
        self.api = api

        self.identity: Optional[str] = None
        self.assignments: list[Assignment] = []
        # error from a load the user did not trigger directly (startup, name entry)
        self.pending_error: Optional[str] = None

        self._submit_lock = threading.Lock()

    def start(self) -> None:
        self.identity = self.identity_store.load()
        self.ledger.load()
        if self.identity:
            self._initial_load()

    def close(self) -> None:
        self.api.close()

    @property
    def submitting(self) -> bool:
        return self._submit_lock.locked()

    def summary(self) -> SessionSummary:
        return SessionSummary(
            name=self.identity,
            submitting=self.submitting,
            assignment_count=len(self.assignments),
            submission_count=len(self.ledger.records()),
        )

    def require_identity(self) -> str:
        if not self.identity:
            raise IdentityRequired(MSG_NAME_REQUIRED)
        return self.identity

    def set_identity(self, raw_name: str) -> str:
        was_absent = self.identity is None
        self.identity = self.identity_store.set(raw_name)
        if was_absent:
            self._initial_load()
        return self.identity

    def _initial_load(self) -> None:
        try:
            self.load_assignments()
        except NetworkError as exc:
            self.pending_error = exc.message

    def take_pending_error(self) -> Optional[str]:
        message, self.pending_error = self.pending_error, None
        return message

    def load_assignments(self) -> list[Assignment]:
        self.require_identity()
        try:
            assignments = self.api.list_assignments()
        except NetworkError as exc:
            # keep whatever was shown before
            raise exc.with_fallback(MSG_LOAD_FAILED) from exc

        self.assignments = assignments
        logger.info("Loaded %d assignments", len(assignments))
        return list(assignments)

    def find_assignment(self, assignment_id: str) -> Assignment:
        for assignment in self.assignments:
            if assignment.assignment_id == assignment_id:
                return assignment
        raise AssignmentNotFound(f"Assignment {assignment_id} not found")

    @contextmanager
    def _single_submit(self) -> Iterator[None]:
        if not self._submit_lock.acquire(blocking=False):
            raise SubmissionInFlight(MSG_SUBMIT_IN_FLIGHT)
        try:
            yield
        finally:
            self._submit_lock.release()

    def submit(self, assignment_id: str, content: str) -> SubmissionRecord:
        name = self.require_identity()
        with self._single_submit():
            if not (content or "").strip():
                raise ValidationError(MSG_CONTENT_REQUIRED)

            assignment = self.find_assignment(assignment_id)
            try:
                submission_id = self.api.create_submission(
                    assignment.assignment_id, name, content
                )
            except NetworkError as exc:
                raise exc.with_fallback(MSG_SUBMIT_FAILED) from exc

            return self.ledger.create(submission_id, assignment)

    def refresh(self, submission_id: str) -> tuple[SubmissionRecord, bool]:
        """Fetch the grading status of one submission and merge it.

        Returns the record and True when it has just been evaluated.
        """
        self.require_identity()
        # unknown ids fail before any request goes out
        self.ledger.get(submission_id)
        try:
            reported = self.api.get_submission_status(submission_id)
        except NetworkError as exc:
            raise exc.with_fallback(MSG_REFRESH_FAILED) from exc

        record, became_evaluated = self.ledger.merge_status(submission_id, reported)
        if became_evaluated:
            logger.info("Submission %s evaluated", submission_id)
        return record, became_evaluated
