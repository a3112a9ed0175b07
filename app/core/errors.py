from fastapi import status


class ClientError(Exception):
    """Base for every failure the student client reports back to the user.

    `status_code` is the HTTP status the student router answers with.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClientError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class IdentityRequired(ClientError):
    status_code = status.HTTP_403_FORBIDDEN


class AssignmentNotFound(ClientError):
    status_code = status.HTTP_404_NOT_FOUND


class SubmissionNotFound(ClientError):
    status_code = status.HTTP_404_NOT_FOUND


class SubmissionInFlight(ClientError):
    status_code = status.HTTP_409_CONFLICT


class NetworkError(ClientError):
    """Grading API call failed.

    `server_message` is the `error` field of the response body when the API
    sent one; it is shown to the user verbatim.
    """

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, server_message: str | None = None):
        super().__init__(message)
        self.server_message = server_message

    def with_fallback(self, fallback: str) -> "NetworkError":
        return NetworkError(self.server_message or fallback, self.server_message)


class StorageError(ClientError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
