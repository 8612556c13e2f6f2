"""Stream message models and the per-session frame decoder

Each streaming session decodes every frame against one message shape chosen
at connect time from the endpoint kind. There is no per-frame detection.
"""

import json
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from quill.shared.exceptions import DecodeError

RFC822_FORMAT = "%d %b %y %H:%M %Z"


def format_rfc822(epoch_seconds: int, tz: tzinfo | None = None) -> str:
    """Render epoch seconds as an RFC 822 date in tz (local time by default)"""
    moment = datetime.fromtimestamp(epoch_seconds, tz=tz)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.strftime(RFC822_FORMAT)


class StreamKind(str, Enum):
    """Streaming endpoint kinds

    WALLET endpoints are known but have no typed shape and decode as RAW.
    """

    RAW = "raw"
    ACTION = "action"
    LIQUIDITY = "liquidity"
    WALLET = "wallet"


class RawMessage(RootModel[dict[str, Any]]):
    """Open-ended JSON object"""

    def render(self, tz: tzinfo | None = None) -> str:
        return json.dumps(self.root, indent=2, sort_keys=True, ensure_ascii=False)


class ActionUpdate(BaseModel):
    """Action lifecycle update pushed by the core client endpoint"""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    id: str
    client_id: str = Field(alias="clientID")
    type: str
    status: str
    timestamp: int
    expire_time: int = Field(alias="expireTime")

    def render(self, tz: tzinfo | None = None) -> str:
        """Multi-line summary with creation and expiry times"""
        return (
            f"NEW ACTION: {self.id}\n"
            f"Type: {self.type}\tStatus: {self.status}\n"
            f"Created: {format_rfc822(self.timestamp, tz)}\t"
            f"Expires: {format_rfc822(self.expire_time, tz)}\n"
        )


class LiquidityUpdate(BaseModel):
    """Transaction status update pushed by the liquidity hub endpoint"""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    tx_id: str = Field(alias="txID")
    status: str

    def render(self, tz: tzinfo | None = None) -> str:
        return f"UPDATE IN LIQUIDITY HUB. TxID: {self.tx_id}, Status: {self.status}"


StreamMessage = Union[RawMessage, ActionUpdate, LiquidityUpdate]

_MODELS: dict[StreamKind, type[BaseModel]] = {
    StreamKind.RAW: RawMessage,
    StreamKind.ACTION: ActionUpdate,
    StreamKind.LIQUIDITY: LiquidityUpdate,
    StreamKind.WALLET: RawMessage,
}


def model_for(kind: StreamKind) -> type[BaseModel]:
    """Message model used for every frame of a session of this kind"""
    return _MODELS[kind]


def decode_frame(raw_frame: str | bytes, kind: StreamKind) -> StreamMessage:
    """Decode one inbound frame against the session's message shape

    Args:
        raw_frame: Text or binary frame payload holding a JSON object
        kind: Endpoint kind fixed at connect time

    Returns:
        RawMessage, ActionUpdate or LiquidityUpdate

    Raises:
        DecodeError: If the frame is not valid JSON or does not match the shape
    """
    model = model_for(kind)
    try:
        return model.model_validate_json(raw_frame)  # type: ignore[return-value]
    except ValidationError as e:
        raise DecodeError(
            f"Frame does not match {model.__name__}: {e.error_count()} error(s): {e}"
        ) from e
