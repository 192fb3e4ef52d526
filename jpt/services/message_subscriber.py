import json
import threading
from typing import Any, Callable, Optional, Union
import structlog
from jpt.config.settings import KafkaSettings
from jpt.connectivity.broker import create_consumer

logger = structlog.get_logger(__name__)


class MessageSubscriber:
    """
    Listens on the channel under a consumer group and logs each envelope.

    A record is acknowledged (its offset committed) only after it has been
    decoded and logged. Records that fail are logged to the error level and
    left unacknowledged; redelivery is up to the broker.
    """

    def __init__(self, settings: KafkaSettings, group_id: str,
                 consumer_factory: Callable[[KafkaSettings, str], Any] = create_consumer):
        self.settings = settings
        self.group_id = group_id
        self._consumer_factory = consumer_factory
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def process(self, raw: Union[bytes, str], acknowledge: Callable[[], Any]) -> bool:
        """Handle one message. Returns True when it was acknowledged."""
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

            logger.info(
                "message_received",
                sender=data.get("from"),
                timestamp=data.get("timestamp"),
                received_data=data.get("receivedData")
            )

            acknowledge()
            return True
        except Exception as e:
            logger.error("message_processing_failed", topic=self.settings.topic, group_id=self.group_id, error=str(e))
            return False

    def poll_once(self, consumer) -> int:
        """Poll one batch and process it. Returns the number of records seen."""
        batches = consumer.poll(timeout_ms=self.settings.poll_timeout_ms)
        count = 0
        for records in batches.values():
            for record in records:
                self.process(record.value, consumer.commit)
                count += 1
        return count

    def run(self):
        """Poll until stopped, recreating the consumer after any connect or poll error"""
        consumer = None
        while not self._stop_event.is_set():
            if consumer is None:
                try:
                    consumer = self._consumer_factory(self.settings, self.group_id)
                    logger.info("subscriber_started", topic=self.settings.topic, group_id=self.group_id)
                except Exception as e:
                    logger.warning("consumer_connect_failed", error=str(e))
                    self._stop_event.wait(self.settings.reconnect_backoff_seconds)
                    continue

            try:
                self.poll_once(consumer)
            except Exception as e:
                logger.warning("consumer_poll_failed", error=str(e))
                self._close(consumer)
                consumer = None
                self._stop_event.wait(self.settings.reconnect_backoff_seconds)

        if consumer is not None:
            self._close(consumer)
        logger.info("subscriber_stopped", topic=self.settings.topic, group_id=self.group_id)

    def _close(self, consumer):
        try:
            consumer.close()
        except Exception as e:
            logger.warning("consumer_close_failed", error=str(e))

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="message-subscriber", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
