"""In-process registry of open wizard sessions.

Each session owns an independent controller (draft + error map). Nothing
is persisted: a restart or an idle timeout discards the draft, exactly as
closing the dashboard modal did.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field

from church_onboarding.config import settings
from church_onboarding.errors import WizardSessionNotFoundError
from church_onboarding.wizard.controller import WizardController

logger = logging.getLogger(__name__)


@dataclass
class WizardSession:
    id: str
    controller: WizardController
    owner: str | None = None
    last_seen: float = field(default_factory=time.monotonic)


class WizardSessionStore:
    def __init__(self, ttl_seconds: int | None = None):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.wizard_session_ttl_seconds
        self._sessions: dict[str, WizardSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, controller: WizardController, owner: str | None = None) -> WizardSession:
        self.evict_expired()
        session = WizardSession(id=uuid.uuid4().hex, controller=controller, owner=owner)
        self._sessions[session.id] = session
        logger.info("Opened wizard session %s", session.id)
        return session

    def get(self, session_id: str) -> WizardSession:
        self.evict_expired()
        session = self._sessions.get(session_id)
        if session is None:
            raise WizardSessionNotFoundError(session_id)
        session.last_seen = time.monotonic()
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def evict_expired(self) -> int:
        """Drop idle sessions. Sessions mid-submission are never evicted."""
        now = time.monotonic()
        expired = [
            sid for sid, s in self._sessions.items()
            if now - s.last_seen > self.ttl_seconds
            and not s.controller.state.is_submitting
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Evicted %d idle wizard session(s)", len(expired))
        return len(expired)


session_store = WizardSessionStore()


def get_session_store() -> WizardSessionStore:
    """FastAPI dependency for the process-wide session store."""
    return session_store
