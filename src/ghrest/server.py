"""Webhook receiver: validates GitHub deliveries and relays them over WebSocket.

Run with: ghrest serve   (or uvicorn ghrest.server:app)
"""

import logging

from fastapi import (
    APIRouter,
    Depends,
    FastAPI,
    HTTPException,
    Request,
    WebSocket,
    WebSocketDisconnect,
)

from .deps import get_webhook_secret, get_ws_manager
from .webhooks import (
    DELIVERY_ID_HEADER,
    EVENT_TYPE_HEADER,
    SHA1_SIGNATURE_HEADER,
    SHA256_SIGNATURE_HEADER,
    SignatureError,
    WebhookError,
    event_for_type,
    parse_webhook,
    validate_payload,
)
from .ws import WebSocketManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


# ---------------------------------------------------------------------------
# Webhook deliveries
# ---------------------------------------------------------------------------


@router.post("/webhooks", status_code=202)
async def receive_webhook(
    request: Request,
    secret: bytes | None = Depends(get_webhook_secret),
    manager: WebSocketManager = Depends(get_ws_manager),
) -> dict:
    """Validate a delivery, decode it and broadcast it to subscribers."""
    event = request.headers.get(EVENT_TYPE_HEADER, "")
    delivery = request.headers.get(DELIVERY_ID_HEADER)
    signature = request.headers.get(SHA256_SIGNATURE_HEADER) or request.headers.get(
        SHA1_SIGNATURE_HEADER
    )
    body = await request.body()

    try:
        payload = validate_payload(
            request.headers.get("Content-Type", ""), body, signature, secret
        )
    except SignatureError as exc:
        logger.warning("Rejected delivery %s (%s): %s", delivery, event, exc)
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except WebhookError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if event_for_type(event) is None:
        raise HTTPException(status_code=400, detail=f"Unknown event type '{event}'")
    try:
        parsed = parse_webhook(event, payload)
    except WebhookError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    data = parsed.model_dump(mode="json", by_alias=True, exclude_none=True)
    delivered = await manager.broadcast(event, delivery, data)
    logger.info("Received %s delivery %s; relayed to %d subscriber(s)", event, delivery, delivered)
    return {"event": event, "delivery": delivery}


@router.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


app = FastAPI(title="ghrest webhook receiver")
app.include_router(router)


@app.websocket("/ws")
async def ws_endpoint(ws: WebSocket) -> None:
    manager = get_ws_manager()
    await manager.connect(ws)
    try:
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        await manager.disconnect(ws)
