# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Insertion directives: text to splice into generated sources, and new marker interface sources."""

from __future__ import annotations

from dataclasses import dataclass

from protomark.interfaces.java import generated_source_path
from protomark.interfaces.message_interface import MessageInterface
from protomark.interfaces.scanner import BindingOrigin, InterfaceBinding
from protomark.model.declarations import PACKAGE_SEPARATOR, MessageDecl, ProtoFile

# ###############
# Public Interface
# ###############

IMPLEMENTS_MARKER_PREFIX = "message_implements:"
LIST_SEPARATOR = ","
# Declarations replace a whole source file rather than filling an insertion point.
DECLARATION_MARKER = ""
MESSAGE_SUPERTYPE = "com.google.protobuf.Message"

_DECLARED_ORIGINS = frozenset({BindingOrigin.MESSAGE_OPTION, BindingOrigin.FILE_OPTION})


@dataclass(frozen=True)
class InsertionPoint:
    """One directive for the code emitter.

    Attributes:
        target: Path of the generated source to modify.
        marker: Insertion point marker inside the target, or empty when
            *content* is the whole source.
        content: Text to insert at the marker.
    """

    target: str
    marker: str
    content: str


def implements_marker(message: MessageDecl) -> str:
    return f"{IMPLEMENTS_MARKER_PREFIX}{message.full_name}"


def emit_directives(
    message: MessageDecl, proto_file: ProtoFile, bindings: list[InterfaceBinding]
) -> list[InsertionPoint]:
    """Turn each binding of *message* into exactly one directive.

    Every content ends with a separator so that directives for the same
    marker concatenate into a valid ``implements`` list.
    """
    target = generated_source_path(message, proto_file)
    marker = implements_marker(message)
    return [
        InsertionPoint(
            target=target,
            marker=marker,
            content=binding.interface.declaration(message, proto_file) + LIST_SEPARATOR,
        )
        for binding in bindings
    ]


def declare_interface(interface: MessageInterface) -> InsertionPoint:
    """A directive that creates the Java source of a marker interface.

    The interface extends the Protobuf message type so that it can only be
    implemented by generated messages.
    """
    package, _, simple_name = interface.name.rpartition(PACKAGE_SEPARATOR)
    lines = [f"package {package};", ""] if package else []
    lines += [f"public interface {simple_name} extends {MESSAGE_SUPERTYPE} {{", "}", ""]
    return InsertionPoint(
        target=interface.name.replace(PACKAGE_SEPARATOR, "/") + ".java",
        marker=DECLARATION_MARKER,
        content="\n".join(lines),
    )


def emit_declarations(bindings: list[InterfaceBinding]) -> list[InsertionPoint]:
    """Declare the interfaces named by the ``is`` and ``every_is`` options.

    Built-in, pattern, and UUID interfaces are expected to exist already.
    """
    return [declare_interface(binding.interface) for binding in bindings if binding.origin in _DECLARED_ORIGINS]
