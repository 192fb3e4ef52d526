from typing import Optional
import structlog
from fastapi import FastAPI
from jpt.api.service_endpoints import router as service_router
from jpt.api.messaging_endpoints import router as messaging_router
from jpt.config.settings import ServiceSettings, MessagingRole
from jpt.connectivity.peer import PeerClient
from jpt.services.message_publisher import MessagePublisher
from jpt.services.message_subscriber import MessageSubscriber
from jpt.utils.log_config import configure_logging, log_requests

logger = structlog.get_logger(__name__)


def create_app(
    settings: ServiceSettings,
    peer_client: Optional[PeerClient] = None,
    publisher: Optional[MessagePublisher] = None,
    subscriber: Optional[MessageSubscriber] = None
) -> FastAPI:
    """
    Build the FastAPI app for one service.

    Settings and clients are constructed once here and stored on app.state;
    handlers receive them through dependencies. Pass clients explicitly to
    replace the defaults (tests do this).
    """
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(title=settings.app_name,
                  description=f"{settings.app_name}: health, synthetic data and calls to {settings.peer_name}")

    app.state.settings = settings
    app.state.peer_client = peer_client or PeerClient(settings.peer_url, timeout=settings.peer_timeout_seconds)
    app.state.publisher = None
    app.state.subscriber = None

    app.include_router(service_router, tags=["Service"])

    if settings.messaging_role == MessagingRole.PUBLISHER:
        app.state.publisher = publisher or MessagePublisher(settings.kafka, sender=settings.sender_label)
        app.include_router(messaging_router, tags=["Messaging"])
    elif settings.messaging_role == MessagingRole.SUBSCRIBER:
        app.state.subscriber = subscriber or MessageSubscriber(settings.kafka, group_id=settings.consumer_group)

    app.middleware("http")(log_requests)

    @app.on_event("startup")
    def on_startup():
        if app.state.subscriber is not None:
            app.state.subscriber.start()
        logger.info("service_started", service=settings.app_name, port=settings.port,
                    peer_url=settings.peer_url, messaging_role=settings.messaging_role.value)

    @app.on_event("shutdown")
    def on_shutdown():
        if app.state.subscriber is not None:
            app.state.subscriber.stop(timeout=settings.kafka.reconnect_backoff_seconds + 5)
        if app.state.publisher is not None:
            app.state.publisher.close()
        app.state.peer_client.close()
        logger.info("service_stopped", service=settings.app_name)

    return app
