import os

TEST_DB_FILE = "test_student_client.db"
os.environ["DATABASE_URL"] = f"sqlite:///./{TEST_DB_FILE}"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.deps import get_student_session  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.kv_entry import KeyValueEntry  # noqa: E402
from app.services.grading_api import GradingApi  # noqa: E402
from app.services.identity_store import IdentityStore  # noqa: E402
from app.services.kv_store import KeyValueStore  # noqa: E402
from app.services.ledger import SubmissionLedger  # noqa: E402
from app.services.student_session import StudentSession  # noqa: E402


class GradingBackend:
    """In-memory state behind the fake grading API."""

    def __init__(self):
        self.assignments = [
            {
                "assignment_id": "a1",
                "title": "Essay",
                "description": "Write about the Analytical Engine",
                "created_at": "2026-10-01T09:00:00Z",
            },
            {
                "assignment_id": "a2",
                "title": "Lab report",
                "description": None,
                "created_at": "2026-10-05T09:00:00Z",
            },
        ]
        self.submissions: dict[str, dict] = {}
        self.received: list[dict] = []
        self.status_requests: list[str] = []

        # failure switches
        self.fail = False
        self.error_message: str | None = None

    def failure(self, status_code: int = 500) -> JSONResponse:
        body = {"error": self.error_message} if self.error_message else {}
        return JSONResponse(status_code=status_code, content=body)

    def evaluate(self, submission_id: str, score: int = 92, risk: str = "low", summary: str = "Good work"):
        self.submissions[submission_id] = {
            "status": "evaluated",
            "feedback": {
                "score": score,
                "plagiarism_risk": risk,
                "feedback_summary": summary,
            },
        }


def build_grading_app(backend: GradingBackend) -> FastAPI:
    grading = FastAPI()

    @grading.get("/assignments")
    def assignments():
        if backend.fail:
            return backend.failure()
        return {"assignments": backend.assignments}

    @grading.post("/submissions")
    def create_submission(payload: dict):
        backend.received.append(payload)
        if backend.fail:
            return backend.failure(400)
        submission_id = f"s{len(backend.submissions) + 1}"
        backend.submissions[submission_id] = {"status": "pending"}
        return {"submission_id": submission_id}

    @grading.get("/submissions/{submission_id}")
    def submission_status(submission_id: str):
        backend.status_requests.append(submission_id)
        if backend.fail:
            return backend.failure(503)
        if submission_id not in backend.submissions:
            return JSONResponse(status_code=404, content={"error": "Submission not found"})
        return backend.submissions[submission_id]

    return grading


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def clear_store():
    """Every test starts with an empty key-value store."""
    db = SessionLocal()
    try:
        db.query(KeyValueEntry).delete()
        db.commit()
        yield
    finally:
        db.close()


@pytest.fixture()
def grading_backend():
    return GradingBackend()


@pytest.fixture()
def grading_api(grading_backend):
    with TestClient(build_grading_app(grading_backend)) as http:
        yield GradingApi(client=http)


@pytest.fixture()
def kv_store():
    return KeyValueStore(SessionLocal)


@pytest.fixture()
def make_session(kv_store, grading_api):
    """Build and start a session over the shared store, like a process restart."""

    def _make() -> StudentSession:
        session = StudentSession(
            identity_store=IdentityStore(kv_store),
            ledger=SubmissionLedger(kv_store),
            api=grading_api,
        )
        session.start()
        return session

    return _make


@pytest.fixture()
def student_session(make_session):
    return make_session()


@pytest.fixture()
def named_session(student_session):
    student_session.set_identity("Ada")
    return student_session


@pytest.fixture()
def client(student_session):
    """Student API client wired to the test session and fake grading API."""
    app.dependency_overrides[get_student_session] = lambda: student_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
