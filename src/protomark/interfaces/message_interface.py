# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Interfaces that generated message classes implement.

An interface is either built in, with a fixed structural predicate, or
custom, named by an option of the message or its file.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

from protomark.interfaces.java import generated_class_name, qualify_interface
from protomark.model.declarations import FieldKind, MessageDecl, ProtoFile

# ###############
# Public Interface
# ###############

UUID_FIELD_NAME = "uuid"


@dataclass(frozen=True)
class IdentityParameter:
    """A generic parameter resolved to the generated class of the message itself."""

    def render(self, message: MessageDecl, proto_file: ProtoFile) -> str:
        return generated_class_name(message, proto_file)


@dataclass(frozen=True)
class ClassParameter:
    """A generic parameter naming a fixed class."""

    name: str

    def render(self, message: MessageDecl, proto_file: ProtoFile) -> str:
        return self.name


GenericParameter = IdentityParameter | ClassParameter


@dataclass(frozen=True)
class MessageInterface:
    """A logical interface implemented by a generated message class.

    Attributes:
        name: Fully-qualified interface name.
        parameters: Generic parameters, in declaration order.
    """

    name: str
    parameters: tuple[GenericParameter, ...] = ()

    def resolved_parameters(self, message: MessageDecl, proto_file: ProtoFile) -> tuple[str, ...]:
        return tuple(parameter.render(message, proto_file) for parameter in self.parameters)

    def declaration(self, message: MessageDecl, proto_file: ProtoFile) -> str:
        """The interface as it appears in an ``implements`` clause of *message*."""
        parameters = self.resolved_parameters(message, proto_file)
        if not parameters:
            return self.name
        return f"{self.name}<{', '.join(parameters)}>"


@dataclass(frozen=True)
class CustomMessageInterface(MessageInterface):
    """An interface named by the ``is`` or ``every_is`` option.

    Custom interfaces never carry generic parameters.
    """

    @classmethod
    def from_option(cls, value: str, proto_file: ProtoFile) -> CustomMessageInterface | None:
        """Build the interface from a raw option value.

        Returns None for a blank value. A name without a package is qualified
        with the Java package of *proto_file*.
        """
        name = value.strip()
        if not name:
            return None
        return cls(name=qualify_interface(name, proto_file))


def is_uuid_value(message: MessageDecl) -> bool:
    """Whether *message* has a single singular string field named ``uuid``."""
    if len(message.fields) != 1:
        return False
    only = message.fields[0]
    return (
        only.name == UUID_FIELD_NAME
        and only.kind is FieldKind.SCALAR
        and only.scalar_type == "string"
        and not only.is_collection
    )


class BuiltInMessageInterface(enum.Enum):
    """Interfaces assigned by structural predicates, in precedence order."""

    COMMAND_MESSAGE = "io.spine.base.CommandMessage"
    EVENT_MESSAGE = "io.spine.base.EventMessage"
    REJECTION_MESSAGE = "io.spine.base.RejectionMessage"
    UUID_VALUE = "io.spine.base.UuidValue"

    @property
    def interface(self) -> MessageInterface:
        parameters: tuple[GenericParameter, ...] = ()
        if self is BuiltInMessageInterface.UUID_VALUE:
            parameters = (IdentityParameter(),)
        return MessageInterface(name=self.value, parameters=parameters)

    def applies_to(self, message: MessageDecl, proto_file: ProtoFile) -> bool:
        return _PREDICATES[self](message, proto_file)

    @classmethod
    def first_match(cls, message: MessageDecl, proto_file: ProtoFile) -> BuiltInMessageInterface | None:
        """The first built-in interface whose predicate holds, in enumeration order."""
        for candidate in cls:
            if candidate.applies_to(message, proto_file):
                return candidate
        return None


# ################
# Implementation
# ################


def _file_suffix_predicate(suffix: str) -> Callable[[MessageDecl, ProtoFile], bool]:
    def predicate(message: MessageDecl, proto_file: ProtoFile) -> bool:
        return message.is_top_level and proto_file.path.lower().endswith(suffix)

    return predicate


_PREDICATES: dict[BuiltInMessageInterface, Callable[[MessageDecl, ProtoFile], bool]] = {
    BuiltInMessageInterface.COMMAND_MESSAGE: _file_suffix_predicate("commands.proto"),
    BuiltInMessageInterface.EVENT_MESSAGE: _file_suffix_predicate("events.proto"),
    BuiltInMessageInterface.REJECTION_MESSAGE: _file_suffix_predicate("rejections.proto"),
    BuiltInMessageInterface.UUID_VALUE: lambda message, _file: is_uuid_value(message),
}
