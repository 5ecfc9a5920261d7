# backend/consult_bridge/api/routes/webhook_routes.py

import json
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from consult_bridge.core.exceptions import SignatureError
from consult_bridge.core.logging import get_logger
from consult_bridge.core.security import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_signature
from consult_bridge.models.events import AgentTurnRequest
from consult_bridge.services.agent_responses import respond_to_turn
from consult_bridge.services.event_dispatcher import EventDispatcher, parse_envelope

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


@router.post("/agent-webhook")
async def agent_webhook(request: Request):
    """
    Single endpoint for both webhook shapes sent by the voice platform:
    lifecycle events (``{event, call}``) and interactive agent turns
    (``{intent, user_input, call_id}``).

    Lifecycle events are always acknowledged with 200 once classified, even
    when storing or texting fails downstream, so the platform never retries.
    """
    dispatcher = _dispatcher(request)
    body = await request.body()

    if dispatcher.settings.VERIFY_WEBHOOK_SIGNATURE:
        try:
            verify_signature(
                dispatcher.settings.WEBHOOK_SECRET,
                body,
                request.headers.get(SIGNATURE_HEADER),
                request.headers.get(TIMESTAMP_HEADER),
            )
        except SignatureError as e:
            raise HTTPException(status_code=401, detail=str(e))

    try:
        payload = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object.")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object.")

    if "event" not in payload and "intent" in payload:
        try:
            turn = AgentTurnRequest.model_validate(payload)
        except ValidationError:
            logger.warning("WEBHOOK: Malformed agent turn request; answering with the default prompt.")
            turn = AgentTurnRequest()
        return respond_to_turn(turn)

    envelope = parse_envelope(payload)
    result = await run_in_threadpool(dispatcher.dispatch, envelope)
    if result.errors:
        logger.warning(f"WEBHOOK: Event '{result.event}' acknowledged with downstream errors: {result.errors}")
    return JSONResponse({"status": "ok", "event": result.event})


@router.get("/test")
async def webhook_test():
    logger.info("WEBHOOK: Test endpoint hit.")
    return {
        "status": "webhook endpoint responding",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
