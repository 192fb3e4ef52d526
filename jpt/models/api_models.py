from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Payloads are exchanged with camelCase keys on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StatusPayload(CamelModel):
    service: str
    message: str
    timestamp: datetime
    port: int
    peer_url: str


class SyntheticDataPayload(CamelModel):
    service: str
    random_number: int = Field(ge=0, lt=1000)
    random_string: str
    timestamp: datetime
    data_type: str
    port: int
    uuid: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        # uuid is only generated on one side
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PeerCallResponse(CamelModel):
    service: str
    message: str
    timestamp: datetime
    peer_response: Dict[str, Any]
    called_url: str
    port: int


class PeerCallError(CamelModel):
    service: str
    error: str
    message: str
    timestamp: datetime
    attempted_url: str
    port: int


class MessageEnvelope(CamelModel):
    sender: str = Field(alias="from")
    timestamp: str
    received_data: Any


class ProduceResponse(CamelModel):
    status: str
    sent_data: MessageEnvelope


class ProduceError(CamelModel):
    status: str = "Error"
    error: str
