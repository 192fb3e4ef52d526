from fastapi import Request
from jpt.config.settings import ServiceSettings
from jpt.connectivity.peer import PeerClient
from jpt.services.message_publisher import MessagePublisher


def get_settings(request: Request) -> ServiceSettings:
    return request.app.state.settings


def get_peer_client(request: Request) -> PeerClient:
    return request.app.state.peer_client


def get_publisher(request: Request) -> MessagePublisher:
    return request.app.state.publisher
