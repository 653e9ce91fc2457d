# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reading schemas from serialized ``FileDescriptorSet`` messages.

Custom options are not registered as extensions here, so protobuf keeps them
as unknown fields of the options messages. They are decoded by field number
as UTF-8 strings.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError, Message
from google.protobuf.unknown_fields import UnknownFieldSet

from protomark.config.settings import OptionNames, OptionNumbers
from protomark.interfaces.java import (
    JAVA_MULTIPLE_FILES_OPTION,
    JAVA_OUTER_CLASSNAME_OPTION,
    JAVA_PACKAGE_OPTION,
)
from protomark.model.declarations import FieldDecl, FieldKind, MessageDecl, ProtoFile, qualify
from protomark.model.schema import SchemaGraph
from protomark.schema.errors import SchemaLoadError

# ###############
# Public Interface
# ###############

FieldProto = descriptor_pb2.FieldDescriptorProto


def parse_descriptor_set(
    data: bytes,
    names: OptionNames | None = None,
    numbers: OptionNumbers | None = None,
) -> SchemaGraph:
    """Decode a serialized ``FileDescriptorSet`` into a schema graph.

    Args:
        data: The serialized descriptor set, e.g. from
            ``protoc --include_imports --descriptor_set_out``.
        names: Option names to store the decoded custom options under.
        numbers: Extension field numbers of the custom options.

    Raises:
        SchemaLoadError: If *data* is not a valid descriptor set.
    """
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise SchemaLoadError(f"Invalid descriptor set: {exc}") from exc
    decoder = _OptionDecoder(names or OptionNames(), numbers or OptionNumbers())
    return SchemaGraph([_convert_file(file_proto, decoder) for file_proto in descriptor_set.file])


# ################
# Implementation
# ################

_LENGTH_DELIMITED = 2


class _OptionDecoder:
    def __init__(self, names: OptionNames, numbers: OptionNumbers) -> None:
        self._file = {numbers.every_is: names.every_is}
        self._message = {numbers.enrichment_for: names.enrichment_for, numbers.is_: names.is_}
        self._field = {numbers.by: names.by}

    def file_options(self, proto: descriptor_pb2.FileDescriptorProto) -> dict[str, str]:
        options = _custom_options(proto.options, self._file)
        if proto.options.HasField("java_package"):
            options[JAVA_PACKAGE_OPTION] = proto.options.java_package
        if proto.options.HasField("java_outer_classname"):
            options[JAVA_OUTER_CLASSNAME_OPTION] = proto.options.java_outer_classname
        if proto.options.HasField("java_multiple_files"):
            options[JAVA_MULTIPLE_FILES_OPTION] = "true" if proto.options.java_multiple_files else "false"
        return options

    def message_options(self, proto: descriptor_pb2.DescriptorProto) -> dict[str, str]:
        return _custom_options(proto.options, self._message)

    def field_options(self, proto: FieldProto) -> dict[str, str]:
        return _custom_options(proto.options, self._field)


def _custom_options(options: Message, by_number: dict[int, str]) -> dict[str, str]:
    decoded: dict[str, str] = {}
    for unknown in UnknownFieldSet(options):
        name = by_number.get(unknown.field_number)
        if name is None or unknown.wire_type != _LENGTH_DELIMITED:
            continue
        try:
            decoded[name] = bytes(unknown.data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SchemaLoadError(f"Option `{name}` is not a UTF-8 string") from exc
    return decoded


def _convert_file(proto: descriptor_pb2.FileDescriptorProto, decoder: _OptionDecoder) -> ProtoFile:
    enums = [qualify(proto.package, enum.name) for enum in proto.enum_type]
    messages = [
        _convert_message(message, proto, None, decoder, enums)
        for message in proto.message_type
        if not message.options.map_entry
    ]
    return ProtoFile(
        path=proto.name,
        package=proto.package,
        options=decoder.file_options(proto),
        messages=messages,
        enums=enums,
    )


def _convert_message(
    proto: descriptor_pb2.DescriptorProto,
    file_proto: descriptor_pb2.FileDescriptorProto,
    parent: str | None,
    decoder: _OptionDecoder,
    enums: list[str],
) -> MessageDecl:
    full_name = qualify(parent if parent is not None else file_proto.package, proto.name)
    enums.extend(qualify(full_name, enum.name) for enum in proto.enum_type)
    map_entries = {
        qualify(full_name, nested.name): nested for nested in proto.nested_type if nested.options.map_entry
    }
    return MessageDecl(
        name=proto.name,
        full_name=full_name,
        package=file_proto.package,
        file=file_proto.name,
        containing_type=parent,
        fields=[_convert_field(field_proto, map_entries, decoder) for field_proto in proto.field],
        nested=[
            _convert_message(nested, file_proto, full_name, decoder, enums)
            for nested in proto.nested_type
            if not nested.options.map_entry
        ],
        options=decoder.message_options(proto),
    )


def _convert_field(
    proto: FieldProto,
    map_entries: dict[str, descriptor_pb2.DescriptorProto],
    decoder: _OptionDecoder,
) -> FieldDecl:
    type_name = proto.type_name.lstrip(".")
    repeated = proto.label == FieldProto.LABEL_REPEATED
    entry = map_entries.get(type_name) if repeated else None
    if entry is not None:
        value = next(f for f in entry.field if f.name == "value")
        return FieldDecl(map=True, options=decoder.field_options(proto), **_field_type(proto.name, value))
    return FieldDecl(repeated=repeated, options=decoder.field_options(proto), **_field_type(proto.name, proto))


def _field_type(name: str, proto: FieldProto) -> dict[str, object]:
    if proto.type in (FieldProto.TYPE_MESSAGE, FieldProto.TYPE_GROUP):
        return {"name": name, "kind": FieldKind.MESSAGE, "type_name": proto.type_name.lstrip(".")}
    if proto.type == FieldProto.TYPE_ENUM:
        return {"name": name, "kind": FieldKind.ENUM, "type_name": proto.type_name.lstrip(".")}
    scalar = FieldProto.Type.Name(proto.type).removeprefix("TYPE_").lower()
    return {"name": name, "kind": FieldKind.SCALAR, "scalar_type": scalar}
