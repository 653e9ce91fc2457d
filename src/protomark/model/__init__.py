# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema model for ProtoMark (files, messages, fields)."""

from protomark.model.declarations import (
    PACKAGE_SEPARATOR,
    FieldDecl,
    FieldKind,
    MessageDecl,
    ProtoFile,
    qualify,
)
from protomark.model.schema import SchemaGraph

__all__ = [
    "PACKAGE_SEPARATOR",
    "FieldKind",
    "FieldDecl",
    "MessageDecl",
    "ProtoFile",
    "SchemaGraph",
    "qualify",
]
