import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError as SchemaError

from app.core.config import GRADING_API_TIMEOUT, GRADING_API_URL
from app.core.errors import NetworkError
from app.schemas.assignment import Assignment, AssignmentList
from app.schemas.submission import SubmissionCreated, SubmissionStatusRead

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> Optional[str]:
    """Return the `error` field of a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return None


class GradingApi:
    """Blocking client for the grading service.

    Every failure (transport error, non-2xx answer, malformed body) is raised
    as `NetworkError`; `server_message` carries the API's own error text.
    """

    def __init__(self, client: Optional[httpx.Client] = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=GRADING_API_URL,
            timeout=GRADING_API_TIMEOUT,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"{method} {path} failed") from exc

        if response.is_error:
            server_message = _error_message(response)
            logger.warning(
                "%s %s -> %s %s",
                method,
                path,
                response.status_code,
                server_message or "",
            )
            raise NetworkError(
                f"{method} {path} returned {response.status_code}",
                server_message=server_message,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise NetworkError(f"{method} {path} returned an unreadable body") from exc

    def list_assignments(self) -> list[Assignment]:
        data = self._request("GET", "/assignments")
        try:
            return AssignmentList.model_validate(data).assignments
        except SchemaError as exc:
            raise NetworkError("GET /assignments returned an unexpected body") from exc

    def create_submission(self, assignment_id: str, student_name: str, content: str) -> str:
        data = self._request(
            "POST",
            "/submissions",
            json={
                "assignment_id": assignment_id,
                "student_name": student_name,
                "content": content,
            },
        )
        try:
            created = SubmissionCreated.model_validate(data)
        except SchemaError as exc:
            raise NetworkError("POST /submissions returned an unexpected body") from exc

        logger.info("Submission %s created for assignment %s", created.submission_id, assignment_id)
        return created.submission_id

    def get_submission_status(self, submission_id: str) -> SubmissionStatusRead:
        path = f"/submissions/{submission_id}"
        data = self._request("GET", path)
        try:
            return SubmissionStatusRead.model_validate(data)
        except SchemaError as exc:
            raise NetworkError(f"GET {path} returned an unexpected body") from exc
