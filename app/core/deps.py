import threading

from fastapi import Request

from app.db.session import SessionLocal
from app.services.grading_api import GradingApi
from app.services.identity_store import IdentityStore
from app.services.kv_store import KeyValueStore
from app.services.ledger import SubmissionLedger
from app.services.student_session import StudentSession

_session_lock = threading.Lock()


def build_student_session() -> StudentSession:
    store = KeyValueStore(SessionLocal)
    session = StudentSession(
        identity_store=IdentityStore(store),
        ledger=SubmissionLedger(store),
        api=GradingApi(),
    )
    session.start()
    return session


# one student session per process, created on first use and closed on shutdown
def get_student_session(request: Request) -> StudentSession:
    state = request.app.state
    session = getattr(state, "student_session", None)
    if session is not None:
        return session

    # start() may wait on the grading API, so build outside the lock
    candidate = build_student_session()
    with _session_lock:
        session = getattr(state, "student_session", None)
        if session is None:
            state.student_session = candidate
            return candidate

    # another request won the race
    candidate.close()
    return session
