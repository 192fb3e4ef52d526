import pytest
from unittest.mock import MagicMock
from httpx import AsyncClient, ASGITransport
from jpt.config.settings import Service1Settings, Service2Settings, KafkaSettings
from jpt.connectivity.peer import PeerClient
from jpt.main import create_app
from jpt.services.message_publisher import MessagePublisher
from jpt.services.message_subscriber import MessageSubscriber


@pytest.fixture
def kafka_settings():
    return KafkaSettings(bootstrap_servers="broker:9092", topic="JPT", poll_timeout_ms=10,
                         reconnect_backoff_seconds=0.01)


@pytest.fixture
def service1_settings(kafka_settings):
    return Service1Settings(peer_url="http://service2:3502", kafka=kafka_settings)


@pytest.fixture
def service2_settings(kafka_settings):
    return Service2Settings(peer_url="http://service1:3501", kafka=kafka_settings)


@pytest.fixture
def mock_session():
    """requests.Session stand-in for the peer client"""
    return MagicMock()


@pytest.fixture
def mock_producer():
    """Kafka producer that records what was sent"""
    return MagicMock()


@pytest.fixture
def publisher(kafka_settings, mock_producer):
    return MessagePublisher(kafka_settings, sender="Service1", producer_factory=lambda settings: mock_producer)


@pytest.fixture
def subscriber(kafka_settings):
    return MessageSubscriber(kafka_settings, group_id="service2-group", consumer_factory=MagicMock())


@pytest.fixture
def service1_app(service1_settings, mock_session, publisher):
    peer_client = PeerClient(service1_settings.peer_url, session=mock_session)
    return create_app(service1_settings, peer_client=peer_client, publisher=publisher)


@pytest.fixture
def service2_app(service2_settings, mock_session, subscriber):
    peer_client = PeerClient(service2_settings.peer_url, session=mock_session)
    return create_app(service2_settings, peer_client=peer_client, subscriber=subscriber)


@pytest.fixture
async def service1_client(service1_app):
    transport = ASGITransport(app=service1_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def service2_client(service2_app):
    transport = ASGITransport(app=service2_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
