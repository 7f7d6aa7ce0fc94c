"""Generation endpoints — POST /api/v1/{llm,image,voice,video} plus CORS preflight.

Bodies are read raw and validated by the gateway rather than by FastAPI, so
every failure, including a malformed body, answers with ``{"error": ...}`` and
the gateway's status mapping instead of FastAPI's 422.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from mediagate.api.dependencies import get_gateway
from mediagate.gateway.gateway import GenerationGateway
from mediagate.gateway.types import ENDPOINT_KINDS

router = APIRouter(tags=["generation"])

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def json_reply(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


@router.options("/{endpoint}")
async def preflight(endpoint: str) -> Response:
    """Cross-origin preflight: empty 200, never touches the gateway."""
    return Response(status_code=200, headers=PREFLIGHT_HEADERS, media_type="application/json")


@router.post("/{endpoint}")
async def generate(
    endpoint: str,
    request: Request,
    gateway: GenerationGateway = Depends(get_gateway),
) -> JSONResponse:
    kind = ENDPOINT_KINDS.get(endpoint)
    if kind is None:
        return json_reply(404, {"error": f"Unknown generation kind: {endpoint}"})

    reply = await gateway.handle(kind, await request.body())
    return json_reply(reply.status_code, reply.body)
