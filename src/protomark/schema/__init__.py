# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema inputs: YAML/JSON documents and binary descriptor sets."""

from protomark.schema.descriptor_set import parse_descriptor_set
from protomark.schema.document import SCALAR_TYPES, SchemaDocument, build_schema, parse_schema_document
from protomark.schema.errors import SchemaLoadError
from protomark.schema.loader import load_schema

__all__ = [
    "SCALAR_TYPES",
    "SchemaDocument",
    "SchemaLoadError",
    "build_schema",
    "load_schema",
    "parse_descriptor_set",
    "parse_schema_document",
]
