from datetime import datetime
from typing import Tuple, Union
import structlog
from jpt.config.settings import ServiceSettings
from jpt.connectivity.peer import PeerClient
from jpt.models.api_models import PeerCallResponse, PeerCallError

logger = structlog.get_logger(__name__)


def call_peer(settings: ServiceSettings, client: PeerClient) -> Tuple[Union[PeerCallResponse, PeerCallError], bool]:
    """
    Call the peer's /data endpoint and wrap the result.

    Returns the payload and whether the call succeeded. Any failure
    (connection, non-2xx, malformed body) becomes a PeerCallError.
    """
    url = client.data_url
    try:
        peer_data = client.fetch_data()
    except Exception as e:
        logger.warning("peer_call_failed", url=url, error=str(e))
        return PeerCallError(
            service=settings.app_name,
            error=f"Failed to call {settings.peer_name}",
            message=str(e),
            timestamp=datetime.now(),
            attempted_url=url,
            port=settings.port
        ), False

    return PeerCallResponse(
        service=settings.app_name,
        message=f"Successfully called {settings.peer_name}",
        timestamp=datetime.now(),
        peer_response=peer_data,
        called_url=url,
        port=settings.port
    ), True
