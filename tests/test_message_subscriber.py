import json
import time
import pytest
from unittest.mock import MagicMock
from kafka.errors import NoBrokersAvailable
from structlog.testing import capture_logs
from jpt.services.message_subscriber import MessageSubscriber


def _record(value):
    record = MagicMock()
    record.value = value
    return record


def _envelope(**overrides):
    envelope = {"from": "Service1", "timestamp": "2024-05-01T10:00:00", "receivedData": {"text": "hi"}}
    envelope.update(overrides)
    return json.dumps(envelope).encode("utf-8")


def test_valid_message_is_logged_and_acknowledged_once(subscriber):
    ack = MagicMock()

    with capture_logs() as logs:
        handled = subscriber.process(_envelope(), ack)

    assert handled is True
    ack.assert_called_once_with()
    assert logs == [{
        "event": "message_received",
        "log_level": "info",
        "sender": "Service1",
        "timestamp": "2024-05-01T10:00:00",
        "received_data": {"text": "hi"},
    }]


def test_text_messages_are_accepted(subscriber):
    ack = MagicMock()

    assert subscriber.process(_envelope().decode("utf-8"), ack) is True
    ack.assert_called_once()


def test_missing_fields_are_logged_as_none(subscriber):
    ack = MagicMock()

    with capture_logs() as logs:
        subscriber.process(json.dumps({"other": 1}), ack)

    assert logs[0]["sender"] is None
    assert logs[0]["received_data"] is None
    ack.assert_called_once()


@pytest.mark.parametrize("raw", [b"{not json", b"[1, 2, 3]", b"\xff\xfe"])
def test_bad_message_is_not_acknowledged(subscriber, raw):
    ack = MagicMock()

    with capture_logs() as logs:
        handled = subscriber.process(raw, ack)

    assert handled is False
    ack.assert_not_called()
    assert logs[0]["event"] == "message_processing_failed"
    assert logs[0]["log_level"] == "error"
    assert logs[0]["group_id"] == "service2-group"


def test_acknowledge_failure_is_logged(subscriber):
    ack = MagicMock(side_effect=RuntimeError("commit failed"))

    with capture_logs() as logs:
        handled = subscriber.process(_envelope(), ack)

    assert handled is False
    assert logs[-1]["error"] == "commit failed"


def test_poll_once_commits_each_good_record(subscriber):
    consumer = MagicMock()
    consumer.poll.return_value = {"JPT-0": [_record(_envelope()), _record(b"garbage"), _record(_envelope())]}

    count = subscriber.poll_once(consumer)

    assert count == 3
    consumer.poll.assert_called_once_with(timeout_ms=10)
    assert consumer.commit.call_count == 2


def _wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_background_loop_consumes_and_stops(kafka_settings):
    consumer = MagicMock()
    batches = [{"JPT-0": [_record(_envelope())]}]

    def poll(timeout_ms):
        time.sleep(0.005)
        return batches.pop() if batches else {}

    consumer.poll.side_effect = poll
    factory = MagicMock(return_value=consumer)
    subscriber = MessageSubscriber(kafka_settings, group_id="service2-group", consumer_factory=factory)

    subscriber.start()
    assert _wait_until(lambda: consumer.commit.call_count == 1)
    subscriber.stop(timeout=2)

    assert not subscriber.running
    factory.assert_called_once_with(kafka_settings, "service2-group")
    consumer.commit.assert_called_once_with()
    consumer.close.assert_called_once()


def test_background_loop_survives_broker_outage(kafka_settings):
    consumer = MagicMock()
    consumer.poll.side_effect = lambda timeout_ms: time.sleep(0.005) or {}
    factory = MagicMock(side_effect=[NoBrokersAvailable(), consumer])
    subscriber = MessageSubscriber(kafka_settings, group_id="service2-group", consumer_factory=factory)

    with capture_logs() as logs:
        subscriber.start()
        assert _wait_until(lambda: consumer.poll.call_count > 0)
        subscriber.stop(timeout=2)

    assert factory.call_count == 2
    events = [log["event"] for log in logs]
    assert "consumer_connect_failed" in events
    assert "subscriber_stopped" in events


@pytest.mark.parametrize("error", [OSError("socket reset"), RuntimeError("unexpected")])
def test_background_loop_survives_poll_error(kafka_settings, error):
    calls = {"n": 0}

    def poll(timeout_ms):
        calls["n"] += 1
        if calls["n"] == 1:
            raise error
        time.sleep(0.005)
        return {}

    first, second = MagicMock(), MagicMock()
    first.poll.side_effect = poll
    second.poll.side_effect = poll
    factory = MagicMock(side_effect=[first, second])
    subscriber = MessageSubscriber(kafka_settings, group_id="service2-group", consumer_factory=factory)

    with capture_logs() as logs:
        subscriber.start()
        assert _wait_until(lambda: calls["n"] > 1)
        assert subscriber.running
        subscriber.stop(timeout=2)

    first.close.assert_called_once()
    assert factory.call_count == 2
    assert any(log["event"] == "consumer_poll_failed" for log in logs)


def test_background_loop_survives_unexpected_connect_error(kafka_settings):
    consumer = MagicMock()
    consumer.poll.side_effect = lambda timeout_ms: time.sleep(0.005) or {}
    factory = MagicMock(side_effect=[OSError("name resolution failed"), consumer])
    subscriber = MessageSubscriber(kafka_settings, group_id="service2-group", consumer_factory=factory)

    subscriber.start()
    assert _wait_until(lambda: consumer.poll.call_count > 0)
    subscriber.stop(timeout=2)

    assert factory.call_count == 2
