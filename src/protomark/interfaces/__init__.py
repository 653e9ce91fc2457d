# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Interface classification of messages and the directives it produces."""

from protomark.interfaces.directives import (
    DECLARATION_MARKER,
    IMPLEMENTS_MARKER_PREFIX,
    MESSAGE_SUPERTYPE,
    InsertionPoint,
    declare_interface,
    emit_declarations,
    emit_directives,
    implements_marker,
)
from protomark.interfaces.java import (
    generated_class_name,
    generated_source_path,
    java_package,
    outer_class_name,
    qualify_interface,
)
from protomark.interfaces.message_interface import (
    BuiltInMessageInterface,
    ClassParameter,
    CustomMessageInterface,
    GenericParameter,
    IdentityParameter,
    MessageInterface,
    is_uuid_value,
)
from protomark.interfaces.scanner import (
    BindingOrigin,
    InterfaceBinding,
    InterfaceClassifier,
    PatternScanner,
    classify,
)

__all__ = [
    "DECLARATION_MARKER",
    "IMPLEMENTS_MARKER_PREFIX",
    "MESSAGE_SUPERTYPE",
    "InsertionPoint",
    "declare_interface",
    "emit_declarations",
    "emit_directives",
    "implements_marker",
    "generated_class_name",
    "generated_source_path",
    "java_package",
    "outer_class_name",
    "qualify_interface",
    "BuiltInMessageInterface",
    "ClassParameter",
    "CustomMessageInterface",
    "GenericParameter",
    "IdentityParameter",
    "MessageInterface",
    "is_uuid_value",
    "BindingOrigin",
    "InterfaceBinding",
    "InterfaceClassifier",
    "PatternScanner",
    "classify",
]
