"""Session management — TTL-scoped wizard sessions, one policy each."""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

from policywizard.models.policy import Policy
from policywizard.service.collaborators import DeferredModal, Translator
from policywizard.service.model_factory import TemplateModelFactory
from policywizard.service.model_service import CONFIRM_MODAL_TEMPLATE, ModelService
from policywizard.service.translation import MessageCatalog


class SessionNotFoundError(KeyError):
    """Raised when a session ID is not found or has expired."""


@dataclass
class WizardSession:
    """State of one wizard run: the policy and the services editing it."""

    policy: Policy
    factory: TemplateModelFactory
    service: ModelService


@dataclass
class SessionInfo:
    """Public session metadata (returned by list/get)."""

    session_id: str
    policy_name: str
    created_at: datetime
    last_accessed_at: datetime
    model_count: int
    cube_count: int
    metadata: dict[str, str]


@dataclass
class _Session:
    """Internal session state."""

    session_id: str
    wizard: WizardSession
    last_accessed: float  # monotonic clock for TTL checks
    metadata: dict[str, str] = field(default_factory=dict)
    # Wall-clock times for reporting
    created_at_wall: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed_wall: datetime = field(default_factory=lambda: datetime.now(UTC))


class SessionManager:
    """Manages TTL-scoped sessions, each holding its own :class:`WizardSession`.

    Thread-safe.  Call :meth:`start` to begin the background cleanup thread
    and :meth:`stop` to shut it down.
    """

    def __init__(
        self,
        ttl_seconds: int = 1800,
        cleanup_interval: float = 60,
        *,
        translator: Translator | None = None,
        confirm_template: str = CONFIRM_MODAL_TEMPLATE,
    ) -> None:
        self._ttl = ttl_seconds
        self._cleanup_interval = cleanup_interval
        self._translator = translator if translator is not None else MessageCatalog()
        self._confirm_template = confirm_template
        self._lock = threading.Lock()
        self._sessions: dict[str, _Session] = {}
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Start the background cleanup daemon thread."""
        if self._cleanup_thread is not None:
            return
        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_loop, daemon=True, name="session-cleanup"
        )
        self._cleanup_thread.start()

    def stop(self) -> None:
        """Signal the cleanup thread to stop and wait for it."""
        self._stop_event.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout=5)
            self._cleanup_thread = None

    # -- public API ----------------------------------------------------------

    def create_session(
        self, policy: Policy | None = None, metadata: dict[str, str] | None = None
    ) -> SessionInfo:
        """Open a wizard session on *policy* (an empty policy by default)."""
        session_id = secrets.token_hex(16)  # 32-char hex (128-bit)
        now_wall = datetime.now(UTC)
        session = _Session(
            session_id=session_id,
            wizard=self._new_wizard(policy if policy is not None else Policy()),
            last_accessed=time.monotonic(),
            metadata=metadata or {},
            created_at_wall=now_wall,
            last_accessed_wall=now_wall,
        )
        with self._lock:
            self._sessions[session_id] = session
        return self._session_info(session)

    def get_wizard(self, session_id: str) -> WizardSession:
        """Get the wizard state of a session, updating its last-accessed time.

        Raises :class:`SessionNotFoundError` if the session is missing or expired.
        """
        with self._lock:
            return self._touch(session_id).wizard

    def get_session(self, session_id: str) -> SessionInfo:
        """Get session info (also refreshes last-accessed)."""
        with self._lock:
            return self._session_info(self._touch(session_id))

    def close_session(self, session_id: str) -> None:
        """Explicitly close a session."""
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(f"Session '{session_id}' not found")
            del self._sessions[session_id]

    def list_sessions(self) -> list[SessionInfo]:
        """Return info for all non-expired sessions."""
        now_mono = time.monotonic()
        with self._lock:
            return [
                self._session_info(s)
                for s in self._sessions.values()
                if now_mono - s.last_accessed <= self._ttl
            ]

    @property
    def active_count(self) -> int:
        """Number of active (non-expired) sessions."""
        now_mono = time.monotonic()
        with self._lock:
            return sum(
                1 for s in self._sessions.values() if now_mono - s.last_accessed <= self._ttl
            )

    # -- internal ------------------------------------------------------------

    def _new_wizard(self, policy: Policy) -> WizardSession:
        factory = TemplateModelFactory(policy)
        # The REST surface drives resolve_dependents/commit directly; the deferred
        # modal only serves in-process callers of ModelService.remove_model.
        service = ModelService(
            policy,
            factory,
            DeferredModal(),
            self._translator,
            confirm_template=self._confirm_template,
        )
        return WizardSession(policy=policy, factory=factory, service=service)

    def _touch(self, session_id: str) -> _Session:
        """Look up a live session and refresh it.  Caller must hold the lock."""
        now_mono = time.monotonic()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        # Lazy expiration check
        if now_mono - session.last_accessed > self._ttl:
            del self._sessions[session_id]
            raise SessionNotFoundError(f"Session '{session_id}' has expired")
        session.last_accessed = now_mono
        session.last_accessed_wall = datetime.now(UTC)
        return session

    @staticmethod
    def _session_info(session: _Session) -> SessionInfo:
        policy = session.wizard.policy
        return SessionInfo(
            session_id=session.session_id,
            policy_name=policy.name,
            created_at=session.created_at_wall,
            last_accessed_at=session.last_accessed_wall,
            model_count=len(policy.transformations),
            cube_count=len(policy.cubes),
            metadata=session.metadata,
        )

    def _purge_expired(self) -> None:
        """Remove all expired sessions (called by cleanup thread)."""
        now_mono = time.monotonic()
        with self._lock:
            expired = [
                sid for sid, s in self._sessions.items() if now_mono - s.last_accessed > self._ttl
            ]
            for sid in expired:
                del self._sessions[sid]

    def _cleanup_loop(self) -> None:
        """Background loop that periodically purges expired sessions."""
        while not self._stop_event.wait(timeout=self._cleanup_interval):
            self._purge_expired()
