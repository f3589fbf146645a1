"""FastAPI application: REST routes and WebSocket for readmission risk sessions."""

import asyncio
import logging
import uuid

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from readmission.collaborators import AgentCollaborators
from readmission.config import RISK_RULES_REFERENCE, RISK_THRESHOLD, SUPPORTED_LANGUAGES
from readmission.errors import SessionBusyError
from readmission.models import LanguageChange, PatientIntake, SessionSnapshot
from readmission.orchestrator import AssessmentOrchestrator
from readmission.scoring import score_intake
from readmission.session import SessionStateController
from readmission.session_store import SessionStore
from readmission.translation import TranslationCoordinator

logger = logging.getLogger(__name__)


# =============================================================================
# App Setup
# =============================================================================

def build_controller() -> SessionStateController:
    collaborators = AgentCollaborators()
    return SessionStateController(
        AssessmentOrchestrator(collaborators),
        TranslationCoordinator(collaborators),
    )


app = FastAPI(title="Risk Radar", docs_url=None, redoc_url=None)

store = SessionStore(build_controller)


def not_found() -> JSONResponse:
    return JSONResponse({"error": "not found"}, status_code=404)


def state_payload(snapshot: SessionSnapshot) -> dict:
    return snapshot.model_dump(mode="json")


# =============================================================================
# API Routes
# =============================================================================

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/languages")
async def api_languages():
    return {"languages": SUPPORTED_LANGUAGES}


@app.get("/api/risk-rules")
async def api_risk_rules():
    return {"threshold": RISK_THRESHOLD, "reference": RISK_RULES_REFERENCE}


@app.post("/api/score")
async def api_score(intake: PatientIntake):
    """Scoring preview only: no explanation, no recommendations, no session."""
    return score_intake(intake).model_dump(mode="json")


@app.get("/api/sessions")
async def api_list_sessions():
    return store.list_sessions()


@app.post("/api/sessions")
async def api_create_session():
    session_id = f"rr_{uuid.uuid4().hex[:8]}"
    meta = store.create_session(session_id)
    return {"session_id": meta.session_id, "created_at": meta.created_at.isoformat()}


@app.delete("/api/sessions/idle")
async def api_delete_idle():
    return {"deleted": store.delete_idle()}


@app.get("/api/sessions/{session_id}")
async def api_get_session(session_id: str):
    controller = store.get_session(session_id)
    if not controller:
        return not_found()
    return state_payload(controller.snapshot())


@app.post("/api/sessions/{session_id}/assess")
async def api_assess(session_id: str, intake: PatientIntake):
    controller = store.get_session(session_id)
    if not controller:
        return not_found()
    return state_payload(await controller.submit(intake))


@app.post("/api/sessions/{session_id}/language")
async def api_change_language(session_id: str, body: LanguageChange):
    controller = store.get_session(session_id)
    if not controller:
        return not_found()
    try:
        snapshot = await controller.change_language(body.language)
    except SessionBusyError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=422)
    return state_payload(snapshot)


# =============================================================================
# WebSocket
# =============================================================================

async def push(websocket: WebSocket, message_type: str, data: dict) -> bool:
    """Send one message if the socket is still open. Returns False if it was not delivered."""
    if websocket.client_state != WebSocketState.CONNECTED:
        return False
    try:
        await websocket.send_json({"type": message_type, "data": data})
    except (WebSocketDisconnect, RuntimeError, OSError) as e:
        # The client went away between the state check and the send
        logger.info("Dropped %s message for closed socket: %r", message_type, e)
        return False
    return True


@app.websocket("/ws/{session_id}")
async def websocket_endpoint(websocket: WebSocket, session_id: str):
    await websocket.accept()

    # Ensure session exists in store
    if not store.get_session(session_id):
        store.create_session(session_id)
    controller = store.get_session(session_id)

    async def send(message_type: str, data: dict):
        await push(websocket, message_type, data)

    async def run_action(action):
        # Each action runs on its own so a newer one can overtake it
        try:
            snapshot = await action
        except (SessionBusyError, ValueError) as e:
            await send("error", {"message": str(e)})
            return
        await send("state", state_payload(snapshot))

    pending: set[asyncio.Task] = set()
    try:
        while True:
            data = await websocket.receive_json()
            payload = data.get("data", {})

            if data.get("type") == "submit":
                try:
                    intake = PatientIntake.model_validate(payload)
                except ValidationError as e:
                    await send("error", {"message": "Invalid patient data", "details": e.errors(include_url=False)})
                    continue
                action = controller.submit(intake)
            elif data.get("type") == "language":
                action = controller.change_language(payload.get("language", ""))
            else:
                continue

            task = asyncio.create_task(run_action(action))
            pending.add(task)
            task.add_done_callback(pending.discard)

            # Let the action take its sequence number, then report the loading state
            await asyncio.sleep(0)
            await send("status", state_payload(controller.snapshot()))

    except WebSocketDisconnect:
        logger.info("Session %s disconnected with %d actions in flight", session_id, len(pending))
