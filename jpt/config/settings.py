from enum import Enum
from typing import List, Optional
from pydantic import AnyHttpUrl, Field, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_http_url = TypeAdapter(AnyHttpUrl)
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class MessagingRole(str, Enum):
    PUBLISHER = "publisher"
    SUBSCRIBER = "subscriber"
    NONE = "none"


class KafkaSettings(BaseSettings):
    """Kafka connection settings"""
    bootstrap_servers: str = Field(default="localhost:9092", validation_alias="KAFKA_BOOTSTRAP_SERVERS")
    topic: str = Field(default="JPT", validation_alias="KAFKA_TOPIC")
    group_id: Optional[str] = Field(default=None, validation_alias="KAFKA_GROUP_ID")
    auto_offset_reset: str = Field(default="latest", validation_alias="KAFKA_AUTO_OFFSET_RESET")
    max_block_ms: int = Field(default=60000, validation_alias="KAFKA_MAX_BLOCK_MS")
    poll_timeout_ms: int = Field(default=1000, validation_alias="KAFKA_POLL_TIMEOUT_MS")
    reconnect_backoff_seconds: float = Field(default=5.0, validation_alias="KAFKA_RECONNECT_BACKOFF_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True, populate_by_name=True)

    @property
    def servers(self) -> List[str]:
        return [server.strip() for server in self.bootstrap_servers.split(",") if server.strip()]


class ServiceSettings(BaseSettings):
    """Settings shared by both services. Subclasses only change defaults."""
    service_key: str = "service"
    app_name: str = Field(default="Service", validation_alias="ATATUS_APP_NAME")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    peer_url: str = Field(default="http://localhost:8000", validation_alias="PEER_URL")
    peer_name: str = "Peer"
    peer_timeout_seconds: Optional[float] = Field(default=None, validation_alias="PEER_TIMEOUT_SECONDS")
    data_type: str = "random-data"
    include_uuid: bool = False
    messaging_role: MessagingRole = Field(default=MessagingRole.NONE, validation_alias="MESSAGING_ROLE")
    sender_label: str = Field(default="Service", validation_alias="MESSAGE_SENDER")
    surface_errors: bool = Field(default=False, validation_alias="SURFACE_ERRORS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="LOG_JSON")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    kafka: KafkaSettings = Field(default_factory=KafkaSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("peer_url")
    @classmethod
    def validate_peer_url(cls, value: str) -> str:
        _http_url.validate_python(value)
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def consumer_group(self) -> str:
        return self.kafka.group_id or f"{self.service_key}-group"


class Service1Settings(ServiceSettings):
    """Service 1: calls Service 2 and publishes onto the channel"""
    service_key: str = "service1"
    app_name: str = Field(default="Service 1", validation_alias="ATATUS_APP_NAME")
    port: int = Field(default=3501, validation_alias="PORT")
    peer_url: str = Field(default="http://localhost:3502", validation_alias="SERVICE2_URL")
    peer_name: str = "Service 2"
    data_type: str = "service1-random-data"
    include_uuid: bool = False
    messaging_role: MessagingRole = Field(default=MessagingRole.PUBLISHER, validation_alias="MESSAGING_ROLE")
    sender_label: str = Field(default="Service1", validation_alias="MESSAGE_SENDER")


class Service2Settings(ServiceSettings):
    """Service 2: calls Service 1 and consumes from the channel"""
    service_key: str = "service2"
    app_name: str = Field(default="Service 2", validation_alias="ATATUS_APP_NAME")
    port: int = Field(default=3502, validation_alias="PORT")
    peer_url: str = Field(default="http://localhost:3501", validation_alias="SERVICE_1_URL")
    peer_name: str = "Service 1"
    data_type: str = "service2-random-data"
    include_uuid: bool = True
    messaging_role: MessagingRole = Field(default=MessagingRole.SUBSCRIBER, validation_alias="MESSAGING_ROLE")
    sender_label: str = Field(default="Service2", validation_alias="MESSAGE_SENDER")
