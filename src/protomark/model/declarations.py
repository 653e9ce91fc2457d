# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only declarations of a Protobuf schema: files, messages, and fields."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

PACKAGE_SEPARATOR = "."


class FieldKind(Enum):
    """The kind of value a field holds."""

    SCALAR = "scalar"
    ENUM = "enum"
    MESSAGE = "message"


class FieldDecl(BaseModel):
    """A field of a message declaration.

    Attributes:
        name: Simple field name as written in the schema.
        kind: Scalar, enum, or message.
        scalar_type: Protobuf scalar type name (``"string"``, ``"int64"``...)
            for scalar fields.
        type_name: Fully-qualified name of the referenced enum or message.
        repeated: True for ``repeated`` fields (map fields are not repeated).
        map: True for ``map<K, V>`` fields.
        options: Raw option values keyed by option name.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind = FieldKind.SCALAR
    scalar_type: str | None = None
    type_name: str | None = None
    repeated: bool = False
    map: bool = False
    options: dict[str, str] = _Field(default_factory=dict)

    @property
    def is_collection(self) -> bool:
        return self.repeated or self.map


class MessageDecl(BaseModel):
    """A message declaration, possibly nested inside another one."""

    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    package: str = ""
    file: str = ""
    containing_type: str | None = None
    fields: list[FieldDecl] = _Field(default_factory=list)
    nested: list[MessageDecl] = _Field(default_factory=list)
    options: dict[str, str] = _Field(default_factory=dict)

    @property
    def is_top_level(self) -> bool:
        return self.containing_type is None

    @property
    def nested_name(self) -> str:
        """The name relative to the package, e.g. ``Outer.Inner``."""
        if self.package and self.full_name.startswith(self.package + PACKAGE_SEPARATOR):
            return self.full_name[len(self.package) + 1 :]
        return self.full_name

    def field(self, name: str) -> FieldDecl | None:
        """Return the field with the given simple name, if declared."""
        for field_decl in self.fields:
            if field_decl.name == name:
                return field_decl
        return None


class ProtoFile(BaseModel):
    """A single schema source file and its top-level declarations."""

    model_config = ConfigDict(frozen=True)

    path: str
    package: str = ""
    options: dict[str, str] = _Field(default_factory=dict)
    messages: list[MessageDecl] = _Field(default_factory=list)
    enums: list[str] = _Field(default_factory=list)


def qualify(package: str, name: str) -> str:
    """Join a package and a (possibly nested) name into a fully-qualified name."""
    return f"{package}{PACKAGE_SEPARATOR}{name}" if package else name


# Resolve forward references in self-referential models.
MessageDecl.model_rebuild()
