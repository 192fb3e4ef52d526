from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from jpt.config.settings import ServiceSettings
from jpt.connectivity.peer import PeerClient
from jpt.api.dependencies import get_settings, get_peer_client
from jpt.services.health_service import get_status
from jpt.services.data_service import generate_synthetic_data
from jpt.services.peer_service import call_peer

router = APIRouter()

# Plain def handlers run on the server's worker thread pool, so the
# blocking peer call only holds up its own request.

@router.get("/health")
def health(settings: ServiceSettings = Depends(get_settings)):
    """Report service identity and the configured peer"""
    return get_status(settings).to_wire()


@router.get("/data")
def data(settings: ServiceSettings = Depends(get_settings)):
    """Return freshly generated synthetic data"""
    return generate_synthetic_data(settings).to_wire()


@router.get("/call")
def call(
    settings: ServiceSettings = Depends(get_settings),
    client: PeerClient = Depends(get_peer_client)
):
    """Call the peer's /data endpoint and wrap its response"""
    payload, ok = call_peer(settings, client)
    status_code = 200 if ok or not settings.surface_errors else 502
    return JSONResponse(content=payload.to_wire(), status_code=status_code)
