import logging
from typing import Optional

from app.core.config import MSG_NAME_REQUIRED, STUDENT_NAME_KEY
from app.core.errors import ValidationError
from app.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class IdentityStore:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self) -> Optional[str]:
        raw = self._store.get(STUDENT_NAME_KEY)
        if raw is None:
            return None
        name = raw.strip()
        return name or None

    def set(self, raw_name: str) -> str:
        name = (raw_name or "").strip()
        if not name:
            raise ValidationError(MSG_NAME_REQUIRED)

        self._store.set(STUDENT_NAME_KEY, name)
        logger.info("Student name set to %r", name)
        return name
