from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from modgate.deps import get_gateway
from modgate.services.gateway import ModerationGateway

router = APIRouter(tags=["photos"])

@router.get("/photo/{reference}", name="get_photo")
async def get_photo(reference: str, gateway: ModerationGateway = Depends(get_gateway)):
    """Proxy a Telegram photo so the front-end never sees the bot token."""
    photo = await gateway.fetch_photo(reference)
    return StreamingResponse(
        photo.iter_bytes(),
        media_type=photo.content_type,
        background=BackgroundTask(photo.aclose),
    )
