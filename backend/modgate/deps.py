from __future__ import annotations
from fastapi import Request
from modgate.services.gateway import ModerationGateway


def get_gateway(request: Request) -> ModerationGateway:
    return request.app.state.gateway
