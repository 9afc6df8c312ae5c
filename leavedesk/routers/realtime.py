import json
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from leavedesk.schemas.notification import NEW_NOTIFICATION_EVENT
from leavedesk.services import get_presence_registry
from leavedesk.utils.app_utils import decode_token
from leavedesk.utils.presence_utils import PresenceRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

# older clients announce themselves with the push event's name
ANNOUNCE_EVENTS = ("announce", NEW_NOTIFICATION_EVENT)


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    presence_registry: PresenceRegistry = Depends(get_presence_registry)
):
    """
    Live notification channel.
    Connect with ``/ws?token=<bearer token>``, then send
    {"event": "announce", "userId": "<id>"}. The id must be the token's
    subject. From then on, leave status changes for that user are pushed as
    {"event": "newNotification", "data": {...}}. Closing the socket removes
    the user's presence entry.
    """
    try:
        user, _ = decode_token(token or "")
    except HTTPException:
        logger.info("Refused socket without a valid token: %s", websocket.client)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    logger.info("New socket connected for %s: %s", user["id"], websocket.client)

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info("Socket disconnected: %s", websocket.client)
                break

            raw = frame.get("text")
            if raw is None:
                logger.warning("Ignoring binary socket message from %s", websocket.client)
                continue
            try:
                message = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring malformed socket message from %s", websocket.client)
                continue

            if not isinstance(message, dict) or message.get("event") not in ANNOUNCE_EVENTS:
                continue

            user_id = str(message.get("userId") or message.get("user_id") or "")
            if user_id != user["id"]:
                logger.warning("Socket for %s tried to announce as %r", user["id"], user_id)
                await websocket.send_json({"event": "announceRejected", "userId": user_id})
                continue

            presence_registry.announce(user_id, websocket)
            await websocket.send_json({"event": "announced", "userId": user_id})

    except WebSocketDisconnect:
        logger.info("Socket disconnected: %s", websocket.client)
    finally:
        presence_registry.remove(websocket)
