# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reading schemas from YAML or JSON documents.

A schema document lists files with their messages, written the way they
appear in ``.proto`` sources::

    files:
      - path: acme/order_events.proto
        package: acme
        options: {java_package: com.acme}
        enums: [Status]
        messages:
          - name: OrderPlaced
            fields:
              - {name: id, type: OrderId}
              - {name: tags, type: string, label: repeated}

Field types are resolved with Protobuf scoping rules: the innermost
enclosing scope is searched first, and a leading dot makes a name absolute.
"""

from __future__ import annotations

from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic import Field as _Field

from protomark.model.declarations import (
    PACKAGE_SEPARATOR,
    FieldDecl,
    FieldKind,
    MessageDecl,
    ProtoFile,
    qualify,
)
from protomark.model.schema import SchemaGraph
from protomark.schema.errors import SchemaLoadError

# ###############
# Public Interface
# ###############

SCALAR_TYPES = frozenset(
    {
        "double",
        "float",
        "int32",
        "int64",
        "uint32",
        "uint64",
        "sint32",
        "sint64",
        "fixed32",
        "fixed64",
        "sfixed32",
        "sfixed64",
        "bool",
        "string",
        "bytes",
    }
)

OptionValue = str | bool | int | float


class FieldDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    label: Literal["optional", "required", "repeated", "map"] = "optional"
    options: dict[str, OptionValue] = _Field(default_factory=dict)


class MessageDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    fields: list[FieldDocument] = _Field(default_factory=list)
    messages: list[MessageDocument] = _Field(default_factory=list)
    enums: list[str] = _Field(default_factory=list)
    options: dict[str, OptionValue] = _Field(default_factory=dict)


class FileDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str
    package: str = ""
    options: dict[str, OptionValue] = _Field(default_factory=dict)
    messages: list[MessageDocument] = _Field(default_factory=list)
    enums: list[str] = _Field(default_factory=list)


class SchemaDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    files: list[FileDocument] = _Field(default_factory=list)


MessageDocument.model_rebuild()


def parse_schema_document(text: str, source_label: str = "<string>") -> SchemaGraph:
    """Parse a YAML or JSON schema document into a schema graph.

    JSON is accepted because it is a subset of YAML.

    Raises:
        SchemaLoadError: If the text is not valid YAML or does not describe
            a schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"Invalid YAML in {source_label}: {exc}") from exc
    if data is None:
        return SchemaGraph([])
    if not isinstance(data, dict):
        raise SchemaLoadError(f"{source_label}: schema document must be a mapping")
    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as exc:
        raise SchemaLoadError(f"{source_label}: invalid schema document: {exc}") from exc
    return build_schema(document)


def build_schema(document: SchemaDocument) -> SchemaGraph:
    """Convert a validated document into declarations with resolved field types."""
    messages: set[str] = set()
    enums: set[str] = set()
    for file_doc in document.files:
        enums.update(qualify(file_doc.package, name) for name in file_doc.enums)
        _collect_names(file_doc.messages, file_doc.package, messages, enums)
    resolver = _TypeResolver(messages, enums)
    return SchemaGraph([_build_file(file_doc, resolver) for file_doc in document.files])


# ################
# Implementation
# ################


def _collect_names(docs: list[MessageDocument], scope: str, messages: set[str], enums: set[str]) -> None:
    for doc in docs:
        full_name = qualify(scope, doc.name)
        messages.add(full_name)
        enums.update(qualify(full_name, name) for name in doc.enums)
        _collect_names(doc.messages, full_name, messages, enums)


class _TypeResolver:
    def __init__(self, messages: set[str], enums: set[str]) -> None:
        self._messages = messages
        self._enums = enums

    def resolve(self, name: str, scope: str) -> str:
        """Resolve *name* from within *scope*, innermost scope first.

        A name that is not declared anywhere is returned as written, so that
        validation can report it.
        """
        if name.startswith(PACKAGE_SEPARATOR):
            return name[1:]
        parts = scope.split(PACKAGE_SEPARATOR) if scope else []
        while True:
            candidate = qualify(PACKAGE_SEPARATOR.join(parts), name)
            if candidate in self._messages or candidate in self._enums:
                return candidate
            if not parts:
                return name
            parts.pop()

    def is_enum(self, full_name: str) -> bool:
        return full_name in self._enums


def _build_file(doc: FileDocument, resolver: _TypeResolver) -> ProtoFile:
    enums = [qualify(doc.package, name) for name in doc.enums]
    messages = [_build_message(m, doc, None, resolver, enums) for m in doc.messages]
    return ProtoFile(
        path=doc.path,
        package=doc.package,
        options=_options(doc.options),
        messages=messages,
        enums=enums,
    )


def _build_message(
    doc: MessageDocument,
    file_doc: FileDocument,
    parent: str | None,
    resolver: _TypeResolver,
    file_enums: list[str],
) -> MessageDecl:
    full_name = qualify(parent if parent is not None else file_doc.package, doc.name)
    file_enums.extend(qualify(full_name, name) for name in doc.enums)
    return MessageDecl(
        name=doc.name,
        full_name=full_name,
        package=file_doc.package,
        file=file_doc.path,
        containing_type=parent,
        fields=[_build_field(f, full_name, resolver) for f in doc.fields],
        nested=[_build_message(m, file_doc, full_name, resolver, file_enums) for m in doc.messages],
        options=_options(doc.options),
    )


def _build_field(doc: FieldDocument, scope: str, resolver: _TypeResolver) -> FieldDecl:
    repeated = doc.label == "repeated"
    is_map = doc.label == "map"
    if doc.type in SCALAR_TYPES:
        return FieldDecl(
            name=doc.name,
            kind=FieldKind.SCALAR,
            scalar_type=doc.type,
            repeated=repeated,
            map=is_map,
            options=_options(doc.options),
        )
    type_name = resolver.resolve(doc.type, scope)
    return FieldDecl(
        name=doc.name,
        kind=FieldKind.ENUM if resolver.is_enum(type_name) else FieldKind.MESSAGE,
        type_name=type_name,
        repeated=repeated,
        map=is_map,
        options=_options(doc.options),
    )


def _options(raw: dict[str, OptionValue]) -> dict[str, str]:
    return {name: _option_text(value) for name, value in raw.items()}


def _option_text(value: OptionValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
