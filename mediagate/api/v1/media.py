"""Media endpoints — stored vendor output and the provider catalogue."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from mediagate.api.dependencies import get_gateway, get_media_store
from mediagate.api.v1.generate import CORS_HEADERS, json_reply
from mediagate.gateway.gateway import GenerationGateway
from mediagate.gateway.media_store import MediaStore

router = APIRouter(tags=["media"])


@router.get("/media/{blob_id}")
async def get_media(blob_id: str, store: MediaStore = Depends(get_media_store)) -> Response:
    """Serve binary output parked by an adapter (image or audio bytes)."""
    item = store.get(blob_id)
    if item is None:
        return json_reply(404, {"error": "Media not found or expired"})
    return Response(content=item.data, media_type=item.content_type, headers=CORS_HEADERS)


@router.get("/providers")
async def list_providers(gateway: GenerationGateway = Depends(get_gateway)) -> JSONResponse:
    """Registered provider ids per media kind, with credential status. Unlisted ids use the fallback."""
    return json_reply(200, gateway.provider_status())
