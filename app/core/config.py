import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Grading API (the instructor-side service that owns assignments and grading)
GRADING_API_URL = os.getenv("GRADING_API_URL", "http://localhost:5000/api")
GRADING_API_TIMEOUT = float(os.getenv("GRADING_API_TIMEOUT", "15"))

# Local key-value store
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/student_client.db")
STUDENT_NAME_KEY = "studentName"
SUBMISSIONS_KEY = "mySubmissions"

# Toast messages
MSG_NAME_REQUIRED = "Please enter your name to continue"
MSG_CONTENT_REQUIRED = "Please enter your submission content"
MSG_SUBMITTED = 'Submission received! Check "My Submissions" for feedback.'
MSG_SUBMIT_FAILED = "Submission failed"
MSG_SUBMIT_IN_FLIGHT = "A submission is already in progress"
MSG_LOAD_FAILED = "Failed to load assignments"
MSG_REFRESH_FAILED = "Failed to refresh"
MSG_FEEDBACK_RECEIVED = "Feedback received!"
