# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Names of the Java sources and classes that protoc generates for a message."""

from __future__ import annotations

from protomark.model.declarations import PACKAGE_SEPARATOR, MessageDecl, ProtoFile

# ###############
# Public Interface
# ###############

JAVA_PACKAGE_OPTION = "java_package"
JAVA_OUTER_CLASSNAME_OPTION = "java_outer_classname"
JAVA_MULTIPLE_FILES_OPTION = "java_multiple_files"

_OUTER_CLASS_SUFFIX = "OuterClass"


def java_package(proto_file: ProtoFile) -> str:
    """The ``java_package`` option of the file, falling back to its proto package."""
    return proto_file.options.get(JAVA_PACKAGE_OPTION, "").strip() or proto_file.package


def multiple_files(proto_file: ProtoFile) -> bool:
    return proto_file.options.get(JAVA_MULTIPLE_FILES_OPTION, "").strip().lower() == "true"


def outer_class_name(proto_file: ProtoFile) -> str:
    """The outer class name, as protoc derives it when the option is absent.

    The file base name is camel-cased (``order_events.proto`` becomes
    ``OrderEvents``). If that collides with a top-level message, ``OuterClass``
    is appended.
    """
    explicit = proto_file.options.get(JAVA_OUTER_CLASSNAME_OPTION, "").strip()
    if explicit:
        return explicit
    base = proto_file.path.replace("\\", "/").rsplit("/", 1)[-1]
    if base.endswith(".proto"):
        base = base[: -len(".proto")]
    name = _camel_case(base)
    if any(message.name == name for message in proto_file.messages):
        name += _OUTER_CLASS_SUFFIX
    return name


def qualify_interface(name: str, proto_file: ProtoFile) -> str:
    """Qualify an interface name without a package with the file's Java package."""
    if PACKAGE_SEPARATOR in name:
        return name
    package = java_package(proto_file)
    return f"{package}{PACKAGE_SEPARATOR}{name}" if package else name


def generated_class_name(message: MessageDecl, proto_file: ProtoFile) -> str:
    """The fully-qualified Java class name generated for *message*."""
    parts = [java_package(proto_file)] if java_package(proto_file) else []
    if not multiple_files(proto_file):
        parts.append(outer_class_name(proto_file))
    parts.append(message.nested_name)
    return PACKAGE_SEPARATOR.join(parts)


def generated_source_path(message: MessageDecl, proto_file: ProtoFile) -> str:
    """The path of the Java source that holds the class of *message*.

    Nested messages live in the source of their top-level ancestor.
    """
    if multiple_files(proto_file):
        type_name = message.nested_name.split(PACKAGE_SEPARATOR, 1)[0]
    else:
        type_name = outer_class_name(proto_file)
    package = java_package(proto_file)
    directory = package.replace(PACKAGE_SEPARATOR, "/") + "/" if package else ""
    return f"{directory}{type_name}.java"


# ################
# Implementation
# ################


def _camel_case(base: str) -> str:
    """Camel-case a file base name the way protoc does.

    Letters following a digit or any other non-alphanumeric character are
    capitalised. Non-alphanumeric characters are dropped.
    """
    result: list[str] = []
    capitalize_next = True
    for char in base:
        if not char.isalnum():
            capitalize_next = True
        elif char.isdigit():
            result.append(char)
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        else:
            result.append(char)
    return "".join(result)
