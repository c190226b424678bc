"""Pydantic schemas for inbound chain events and their parameter types.

Parameters arrive in chain-JSON: byte vectors as ``0x``-prefixed hex strings,
enum values as single-key objects (``{"Moderator": 3}``) or bare variant names
for unit variants (``"Lead"``), and ``null`` for ``None``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from chainview.db.time import from_block_timestamp

HEX_PREFIX = "0x"


def to_bytes(value: Any) -> bytes:
    """Return the raw bytes of a chain byte vector."""
    if value is None:
        return b""
    if isinstance(value, bytes | bytearray):
        return bytes(value)
    if isinstance(value, list):
        return bytes(value)
    if isinstance(value, str):
        if value.startswith(HEX_PREFIX):
            return bytes.fromhex(value[len(HEX_PREFIX):])
        return value.encode("utf-8")
    raise TypeError(f"Cannot decode {type(value).__name__} as bytes")


def bytes_to_string(value: Any) -> str:
    return to_bytes(value).decode("utf-8", errors="replace")


def split_variant(raw: Any) -> tuple[str, Any]:
    """Split a chain enum value into its variant name and payload."""
    if isinstance(raw, str):
        return raw, None
    if isinstance(raw, dict) and len(raw) == 1:
        ((name, payload),) = raw.items()
        return name, payload
    raise ValueError(f"Not an enum value: {raw!r}")


def as_id(value: Any) -> str:
    """Render a numeric chain id as the string key used by the store."""
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid id")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid id: {value!r}")
        return str(value)
    if isinstance(value, str) and value.isdigit():
        return value
    raise ValueError(f"Invalid id: {value!r}")


def as_int(value: Any) -> int:
    return int(as_id(value))


def as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Expected a boolean, got {value!r}")
    return value


class ChainEvent(BaseModel):
    """A single runtime event with its block coordinates."""

    domain: str
    name: str
    params: list[Any] = Field(default_factory=list)
    block_number: int = Field(ge=0)
    # Milliseconds since the epoch.
    block_timestamp: int = Field(ge=0)
    index_in_block: int = Field(ge=0)
    extrinsic: str | None = None

    @property
    def event_id(self) -> str:
        return f"{self.block_number}-{self.index_in_block}"

    @property
    def qualified_name(self) -> str:
        return f"{self.domain}.{self.name}"

    @property
    def created_at(self) -> datetime:
        return from_block_timestamp(self.block_timestamp)

    def param(self, index: int) -> Any:
        """Return the positional parameter at ``index``."""
        if index >= len(self.params):
            raise IndexError(
                f"{self.qualified_name} carries {len(self.params)} params, "
                f"parameter {index} requested"
            )
        return self.params[index]


class ChainBlock(BaseModel):
    """An ordered batch of events from one block."""

    number: int = Field(ge=0)
    timestamp: int = Field(ge=0)
    events: list[ChainEvent] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _inherit_block_coordinates(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        events = []
        for index, raw in enumerate(data.get("events") or []):
            if isinstance(raw, dict):
                raw = {
                    "block_number": data.get("number"),
                    "block_timestamp": data.get("timestamp"),
                    "index_in_block": index,
                    **raw,
                }
            events.append(raw)
        return {**data, "events": events}

    @model_validator(mode="after")
    def _check_event_order(self) -> ChainBlock:
        previous = -1
        for event in self.events:
            if event.block_number != self.number:
                raise ValueError(f"Event {event.event_id} does not belong to block {self.number}")
            if event.index_in_block <= previous:
                raise ValueError(f"Events of block {self.number} are out of order")
            previous = event.index_in_block
        return self


# Actors


class LeadActor(BaseModel):
    """The working-group lead."""

    model_config = ConfigDict(frozen=True)


class ModeratorActor(BaseModel):
    """A forum moderator, identified by runtime worker id within the forum group."""

    model_config = ConfigDict(frozen=True)

    runtime_id: int = Field(ge=0)


PrivilegedActor = LeadActor | ModeratorActor


def parse_privileged_actor(raw: Any) -> PrivilegedActor:
    variant, payload = split_variant(raw)
    if variant == "Lead":
        return LeadActor()
    if variant == "Moderator":
        return ModeratorActor(runtime_id=payload)
    raise ValueError(f"Unknown privileged actor: {variant}")


class LeadContentActor(BaseModel):
    model_config = ConfigDict(frozen=True)

    def label(self) -> str:
        return "lead"


class CuratorContentActor(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: str
    curator_id: str

    def label(self) -> str:
        return f"curator:{self.group_id}:{self.curator_id}"


class MemberContentActor(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_id: str

    def label(self) -> str:
        return f"member:{self.member_id}"


ContentActor = LeadContentActor | CuratorContentActor | MemberContentActor


def parse_content_actor(raw: Any) -> ContentActor:
    variant, payload = split_variant(raw)
    if variant == "Lead":
        return LeadContentActor()
    if variant == "Curator":
        group_id, curator_id = payload
        return CuratorContentActor(group_id=as_id(group_id), curator_id=as_id(curator_id))
    if variant == "Member":
        return MemberContentActor(member_id=as_id(payload))
    raise ValueError(f"Unknown content actor: {variant}")


class MemberChannelOwner(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_id: str


class CuratorGroupChannelOwner(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: str


ChannelOwner = MemberChannelOwner | CuratorGroupChannelOwner


def parse_channel_owner(raw: Any) -> ChannelOwner:
    variant, payload = split_variant(raw)
    if variant == "Member":
        return MemberChannelOwner(member_id=as_id(payload))
    if variant == "CuratorGroup":
        return CuratorGroupChannelOwner(group_id=as_id(payload))
    raise ValueError(f"Unknown channel owner: {variant}")


# Assets


class UrlsAsset(BaseModel):
    """Asset living outside the storage system, described by its URLs."""

    model_config = ConfigDict(frozen=True)

    urls: list[str]

    @field_validator("urls", mode="before")
    @classmethod
    def _decode_urls(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [bytes_to_string(url) for url in value]
        return value


class UploadAsset(BaseModel):
    """Asset uploaded to the storage system."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    ipfs_content_id: str
    type_id: int = Field(ge=0)
    size: int = Field(ge=0)

    @field_validator("ipfs_content_id", mode="before")
    @classmethod
    def _decode_ipfs_id(cls, value: Any) -> Any:
        if isinstance(value, str | bytes | list):
            return bytes_to_string(value)
        return value


NewAsset = UrlsAsset | UploadAsset


def parse_new_asset(raw: Any) -> NewAsset:
    variant, payload = split_variant(raw)
    if variant == "Urls":
        return UrlsAsset(urls=payload)
    if variant == "Upload":
        return UploadAsset.model_validate(payload)
    raise ValueError(f"Unknown asset variant: {variant}")


def parse_new_assets(raw: Any) -> list[NewAsset]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TypeError(f"Expected a list of assets, got {raw!r}")
    return [parse_new_asset(item) for item in raw]


# Forum inputs


class PollInput(BaseModel):
    """Poll definition carried by a thread-creation event."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = Field(alias="description_hash")
    # Milliseconds since the epoch.
    end_time: int = Field(ge=0)
    alternatives: list[str] = Field(alias="poll_alternatives")

    @field_validator("description", mode="before")
    @classmethod
    def _decode_description(cls, value: Any) -> Any:
        return bytes_to_string(value)

    @field_validator("alternatives", mode="before")
    @classmethod
    def _decode_alternatives(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        decoded = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("alternative_text_hash")
            decoded.append(bytes_to_string(item))
        return decoded

    @property
    def end_at(self) -> datetime:
        return from_block_timestamp(self.end_time)
