from typing import Any, Optional
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from jpt.config.settings import ServiceSettings
from jpt.api.dependencies import get_settings, get_publisher
from jpt.models.api_models import ProduceError
from jpt.services.message_publisher import MessagePublisher

router = APIRouter()


@router.post("/produce-message")
@router.post("/produce-kafka-message", include_in_schema=False)
def produce_message(
    body: Optional[Any] = Body(None),
    settings: ServiceSettings = Depends(get_settings),
    publisher: MessagePublisher = Depends(get_publisher)
):
    """Wrap the request body in an envelope and publish it to the channel"""
    result = publisher.publish(body)
    failed = isinstance(result, ProduceError)
    status_code = 503 if failed and settings.surface_errors else 200
    return JSONResponse(content=result.to_wire(), status_code=status_code)
