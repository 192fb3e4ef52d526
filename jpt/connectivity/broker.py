from kafka import KafkaConsumer, KafkaProducer
from jpt.config.settings import KafkaSettings


def create_producer(settings: KafkaSettings) -> KafkaProducer:
    """Return a producer that sends UTF-8 text values"""
    return KafkaProducer(
        bootstrap_servers=settings.servers,
        value_serializer=lambda value: value.encode("utf-8"),
        max_block_ms=settings.max_block_ms,
    )


def create_consumer(settings: KafkaSettings, group_id: str) -> KafkaConsumer:
    """
    Return a consumer subscribed to the configured topic.

    Offsets are committed manually and one record is fetched per poll, so a
    commit acknowledges exactly the record that was just processed.
    """
    return KafkaConsumer(
        settings.topic,
        bootstrap_servers=settings.servers,
        group_id=group_id,
        enable_auto_commit=False,
        auto_offset_reset=settings.auto_offset_reset,
        max_poll_records=1,
    )
