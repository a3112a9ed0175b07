"""
Locally persisted list of the student's submissions.

The ledger is a client-side cache: the grading API is authoritative only for
`status` and `feedback`, everything else is fixed when the record is created.
Records are kept newest first and never re-sorted.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from pydantic import TypeAdapter, ValidationError as SchemaError

from app.core.config import SUBMISSIONS_KEY
from app.core.errors import SubmissionNotFound
from app.schemas.assignment import Assignment
from app.schemas.submission import (
    EVALUATED,
    PENDING,
    SubmissionRecord,
    SubmissionStatusRead,
)
from app.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[SubmissionRecord])


def dump_records(records: list[SubmissionRecord]) -> str:
    return _records_adapter.dump_json(records).decode()


def parse_records(raw: Optional[str]) -> list[SubmissionRecord]:
    """Deserialize a stored ledger; unreadable data yields an empty ledger."""
    if not raw:
        return []
    try:
        return _records_adapter.validate_json(raw)
    except SchemaError as exc:
        logger.warning("Discarding unreadable submission cache: %s", exc.errors()[:1])
        return []


def merged_record(
    record: SubmissionRecord, reported: SubmissionStatusRead
) -> SubmissionRecord:
    """
    Apply a status report to a record.

    Only `status` and `feedback` change. An evaluated record stays evaluated,
    and feedback is kept only alongside the evaluated status.
    """
    if record.status == EVALUATED and reported.status != EVALUATED:
        logger.warning(
            "Ignoring status %r for already evaluated submission %s",
            reported.status,
            record.submission_id,
        )
        return record

    feedback = reported.feedback if reported.status == EVALUATED else None
    return record.model_copy(update={"status": reported.status, "feedback": feedback})


class SubmissionLedger:
    def __init__(self, store: KeyValueStore):
        self._store = store
        self._lock = threading.Lock()
        self._records: list[SubmissionRecord] = []

    def load(self) -> list[SubmissionRecord]:
        with self._lock:
            self._records = parse_records(self._store.get(SUBMISSIONS_KEY))
            logger.info("Loaded %d cached submissions", len(self._records))
            return list(self._records)

    def records(self) -> list[SubmissionRecord]:
        with self._lock:
            return list(self._records)

    def get(self, submission_id: str) -> SubmissionRecord:
        with self._lock:
            return self._records[self._index_of(submission_id)]

    def _index_of(self, submission_id: str) -> int:
        for i, record in enumerate(self._records):
            if record.submission_id == submission_id:
                return i
        raise SubmissionNotFound(f"Submission {submission_id} not found")

    def _write(self, records: list[SubmissionRecord]) -> None:
        # the store commits first; memory follows only on success
        self._store.set(SUBMISSIONS_KEY, dump_records(records))
        self._records = records

    def create(self, submission_id: str, assignment: Assignment) -> SubmissionRecord:
        record = SubmissionRecord(
            submission_id=submission_id,
            assignment_id=assignment.assignment_id,
            assignment_title=assignment.title,
            submitted_at=datetime.now(timezone.utc),
            status=PENDING,
        )
        with self._lock:
            self._write([record, *self._records])
        return record

    def merge_status(
        self, submission_id: str, reported: SubmissionStatusRead
    ) -> tuple[SubmissionRecord, bool]:
        """Merge a status report into the record with this id.

        Returns the updated record and whether this merge moved it into
        the evaluated state.
        """
        with self._lock:
            i = self._index_of(submission_id)
            previous = self._records[i]
            updated = merged_record(previous, reported)

            records = list(self._records)
            records[i] = updated
            self._write(records)

        became_evaluated = previous.status != EVALUATED and updated.status == EVALUATED
        return updated, became_evaluated
