# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type and field references used in schema options."""

from protomark.refs.field_ref import FieldPath, FieldRef
from protomark.refs.type_ref import (
    ANY,
    CONTEXT,
    AnyTypeRef,
    CompositeTypeRef,
    ContextTypeRef,
    DirectTypeRef,
    InvalidReferenceError,
    PackageTypeRef,
    TypeRef,
    matches,
    parse_composite,
    parse_direct,
    parse_package,
    parse_type_ref,
    ref_value,
    type_ref_from,
    with_package,
)

__all__ = [
    # Type references
    "TypeRef",
    "DirectTypeRef",
    "PackageTypeRef",
    "CompositeTypeRef",
    "AnyTypeRef",
    "ContextTypeRef",
    "ANY",
    "CONTEXT",
    "InvalidReferenceError",
    "parse_type_ref",
    "type_ref_from",
    "parse_direct",
    "parse_package",
    "parse_composite",
    "matches",
    "ref_value",
    "with_package",
    # Field references
    "FieldPath",
    "FieldRef",
]
