import threading
from datetime import datetime
from typing import Any, Callable, Union
import structlog
from jpt.config.settings import KafkaSettings
from jpt.connectivity.broker import create_producer
from jpt.models.api_models import MessageEnvelope, ProduceResponse, ProduceError

logger = structlog.get_logger(__name__)

SUCCESS_STATUS = "Message sent to Kafka successfully"


class MessagePublisher:
    """
    Wraps request bodies in an envelope and hands them to the channel.

    The producer is built on first use and reused afterwards, so the service
    starts even when the broker is down. Publishing is fire-and-forget: only
    errors raised by the local send call are reported to the caller.
    """

    def __init__(self, settings: KafkaSettings, sender: str,
                 producer_factory: Callable[[KafkaSettings], Any] = create_producer):
        self.settings = settings
        self.sender = sender
        self._producer_factory = producer_factory
        self._producer = None
        self._lock = threading.Lock()

    def _get_producer(self):
        with self._lock:
            if self._producer is None:
                self._producer = self._producer_factory(self.settings)
            return self._producer

    def build_envelope(self, body: Any) -> MessageEnvelope:
        return MessageEnvelope(
            sender=self.sender,
            timestamp=datetime.now().isoformat(),
            received_data=body
        )

    def publish(self, body: Any) -> Union[ProduceResponse, ProduceError]:
        try:
            envelope = self.build_envelope(body)
            message = envelope.model_dump_json(by_alias=True)

            future = self._get_producer().send(self.settings.topic, message)
            future.add_errback(self._on_delivery_error)

            logger.info("message_published", topic=self.settings.topic, sender=self.sender)
            return ProduceResponse(status=SUCCESS_STATUS, sent_data=envelope)
        except Exception as e:
            logger.error("message_publish_failed", topic=self.settings.topic, error=str(e))
            return ProduceError(error=str(e))

    def _on_delivery_error(self, exc: BaseException):
        logger.error("message_delivery_failed", topic=self.settings.topic, error=str(exc))

    def close(self):
        with self._lock:
            if self._producer is not None:
                self._producer.close()
                self._producer = None
