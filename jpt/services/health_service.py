from datetime import datetime
from jpt.config.settings import ServiceSettings
from jpt.models.api_models import StatusPayload


def get_status(settings: ServiceSettings) -> StatusPayload:
    """Build the status payload; never touches the peer"""
    return StatusPayload(
        service=settings.app_name,
        message=f"Hello from {settings.app_name}!",
        timestamp=datetime.now(),
        port=settings.port,
        peer_url=settings.peer_url
    )
