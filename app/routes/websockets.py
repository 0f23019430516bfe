# app/routes/websockets.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from app.services.websockets.manager import manager
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Push-only channel: sync progress events are broadcast here while a run is active."""
    await manager.connect(websocket)
    try:
        while True:
            # Client messages are only used to keep the connection open
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("WebSocket client disconnected")
