"""Protobuf message classes for on-chain metadata payloads.

The schemas are declared here as descriptors and registered in a private
pool, so no generated ``_pb2`` modules are needed. All messages use proto2
syntax: every scalar field is optional and keeps explicit presence, which
is what lets an update distinguish "absent" from "set to the default".
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

PACKAGE = "chainview.metadata"

_Field = descriptor_pb2.FieldDescriptorProto

STRING = _Field.TYPE_STRING
BOOL = _Field.TYPE_BOOL
UINT32 = _Field.TYPE_UINT32
UINT64 = _Field.TYPE_UINT64
MESSAGE = _Field.TYPE_MESSAGE

# (name, number, type, nested message name or None, repeated)
FieldSpec = tuple[str, int, int, str | None, bool]

SCHEMAS: dict[str, list[FieldSpec]] = {
    "ChannelMetadata": [
        ("title", 1, STRING, None, False),
        ("description", 2, STRING, None, False),
        ("is_public", 3, BOOL, None, False),
        ("language", 4, STRING, None, False),
        # Indices into the assets vector of the same event.
        ("cover_photo", 5, UINT32, None, False),
        ("avatar_photo", 6, UINT32, None, False),
        ("category", 7, UINT64, None, False),
    ],
    "ChannelCategoryMetadata": [
        ("name", 1, STRING, None, False),
    ],
    "MediaType": [
        ("codec_name", 1, STRING, None, False),
        ("container", 2, STRING, None, False),
        ("mime_media_type", 3, STRING, None, False),
    ],
    "License": [
        ("code", 1, UINT32, None, False),
        ("attribution", 2, STRING, None, False),
        ("custom_text", 3, STRING, None, False),
    ],
    "PublishedBeforePlatform": [
        ("is_published", 1, BOOL, None, False),
        ("date", 2, STRING, None, False),
    ],
    "VideoMetadata": [
        ("title", 1, STRING, None, False),
        ("description", 2, STRING, None, False),
        ("video", 3, UINT32, None, False),
        ("thumbnail_photo", 4, UINT32, None, False),
        ("duration", 5, UINT32, None, False),
        ("media_pixel_height", 6, UINT32, None, False),
        ("media_pixel_width", 7, UINT32, None, False),
        ("media_type", 8, MESSAGE, "MediaType", False),
        ("language", 9, STRING, None, False),
        ("license", 10, MESSAGE, "License", False),
        ("published_before_platform", 11, MESSAGE, "PublishedBeforePlatform", False),
        ("has_marketing", 12, BOOL, None, False),
        ("is_public", 13, BOOL, None, False),
        ("is_explicit", 14, BOOL, None, False),
        ("persons", 15, UINT64, None, True),
        ("category", 16, UINT64, None, False),
    ],
    "VideoCategoryMetadata": [
        ("name", 1, STRING, None, False),
    ],
    "ForumPostMetadata": [
        ("text", 1, STRING, None, False),
        ("replies_to", 2, UINT64, None, False),
    ],
}


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="chainview/metadata.proto",
        package=PACKAGE,
        syntax="proto2",
    )
    for message_name, fields in SCHEMAS.items():
        message = file_proto.message_type.add(name=message_name)
        for name, number, field_type, type_name, repeated in fields:
            field = message.field.add(
                name=name,
                number=number,
                type=field_type,
                label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
            )
            if type_name is not None:
                field.type_name = f".{PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.Add(_build_file())


def message_class(name: str) -> type[Message]:
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


ChannelMetadata = message_class("ChannelMetadata")
ChannelCategoryMetadata = message_class("ChannelCategoryMetadata")
VideoMetadata = message_class("VideoMetadata")
VideoCategoryMetadata = message_class("VideoCategoryMetadata")
MediaType = message_class("MediaType")
License = message_class("License")
PublishedBeforePlatform = message_class("PublishedBeforePlatform")
ForumPostMetadata = message_class("ForumPostMetadata")
