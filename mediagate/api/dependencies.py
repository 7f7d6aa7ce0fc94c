from fastapi import Request

from mediagate.gateway.gateway import GenerationGateway
from mediagate.gateway.media_store import MediaStore


def get_gateway(request: Request) -> GenerationGateway:
    return request.app.state.gateway


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store
