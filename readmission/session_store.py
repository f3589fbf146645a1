"""In-memory registry of session controllers. Nothing is persisted."""

from datetime import datetime, timezone
from typing import Callable

from readmission.models import SessionMeta, SessionState
from readmission.session import SessionStateController


class SessionStore:
    """One SessionStateController per browser session, built by `controller_factory`."""

    def __init__(self, controller_factory: Callable[[], SessionStateController]):
        self.controller_factory = controller_factory
        self._controllers: dict[str, SessionStateController] = {}
        self._meta: dict[str, SessionMeta] = {}

    def create_session(self, session_id: str) -> SessionMeta:
        meta = SessionMeta(session_id=session_id, created_at=datetime.now(timezone.utc))
        self._controllers[session_id] = self.controller_factory()
        self._meta[session_id] = meta
        return meta

    def get_session(self, session_id: str) -> SessionStateController | None:
        return self._controllers.get(session_id)

    def list_sessions(self, limit: int = 50) -> list[dict]:
        metas = sorted(self._meta.values(), key=lambda m: m.created_at, reverse=True)[:limit]
        rows = []
        for meta in metas:
            controller = self._controllers[meta.session_id]
            rows.append({
                "session_id": meta.session_id,
                "created_at": meta.created_at.isoformat(),
                "state": controller.state.value,
                "language": controller.language,
            })
        return rows

    def delete_session(self, session_id: str) -> bool:
        self._meta.pop(session_id, None)
        return self._controllers.pop(session_id, None) is not None

    def delete_idle(self) -> int:
        """Drop sessions sitting idle with no assessment on display. Returns count deleted."""
        idle = [
            sid for sid, controller in self._controllers.items()
            if controller.state == SessionState.IDLE and controller.display.assessment is None
        ]
        for sid in idle:
            self.delete_session(sid)
        return len(idle)
