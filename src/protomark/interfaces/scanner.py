# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Classification of messages against the interfaces they implement."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from protomark.config.settings import OptionNames, PatternRule, ProtomarkConfig
from protomark.interfaces.java import qualify_interface
from protomark.interfaces.message_interface import (
    BuiltInMessageInterface,
    CustomMessageInterface,
    IdentityParameter,
    MessageInterface,
    is_uuid_value,
)
from protomark.model.declarations import MessageDecl, ProtoFile

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class BindingOrigin(enum.Enum):
    """Which rule contributed an interface binding."""

    BUILT_IN = "built-in"
    MESSAGE_OPTION = "message-option"
    FILE_OPTION = "file-option"
    PATTERN = "pattern"
    UUID = "uuid"


@dataclass(frozen=True)
class InterfaceBinding:
    """A message bound to one interface."""

    interface: MessageInterface
    origin: BindingOrigin


class PatternScanner:
    """Matches top-level messages against file path pattern rules.

    Rules are tried in order and the first one whose suffix occurs in the
    file path wins. Rules with an empty interface never match.
    """

    def __init__(self, rules: tuple[PatternRule, ...] | list[PatternRule]) -> None:
        self._rules = tuple(rule for rule in rules if rule.interface.strip())

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def scan(self, message: MessageDecl, proto_file: ProtoFile) -> MessageInterface | None:
        if not message.is_top_level:
            return None
        for rule in self._rules:
            if rule.suffix in proto_file.path:
                return MessageInterface(name=qualify_interface(rule.interface.strip(), proto_file))
        return None


class InterfaceClassifier:
    """Computes the interface bindings of a message.

    The rule tables are built once from the configuration and shared by
    every call, so one classifier can serve many worker threads.
    """

    def __init__(self, config: ProtomarkConfig | None = None) -> None:
        config = config or ProtomarkConfig()
        self._options: OptionNames = config.options
        self._scanner = PatternScanner(config.patterns)
        uuid_name = (config.uuid_interface or "").strip()
        self._uuid_interface = uuid_name or None

    def classify(self, message: MessageDecl, proto_file: ProtoFile) -> list[InterfaceBinding]:
        """Return the bindings of *message* in precedence order.

        Built-in, explicit, pattern, and UUID bindings accumulate. The
        message ``is`` option suppresses the file ``every_is`` option.
        """
        bindings: list[InterfaceBinding] = []

        built_in = BuiltInMessageInterface.first_match(message, proto_file)
        if built_in is not None:
            bindings.append(InterfaceBinding(built_in.interface, BindingOrigin.BUILT_IN))

        explicit = CustomMessageInterface.from_option(message.options.get(self._options.is_, ""), proto_file)
        if explicit is not None:
            bindings.append(InterfaceBinding(explicit, BindingOrigin.MESSAGE_OPTION))
        else:
            blanket = CustomMessageInterface.from_option(
                proto_file.options.get(self._options.every_is, ""), proto_file
            )
            if blanket is not None:
                bindings.append(InterfaceBinding(blanket, BindingOrigin.FILE_OPTION))

        pattern = self._scanner.scan(message, proto_file)
        if pattern is not None:
            bindings.append(InterfaceBinding(pattern, BindingOrigin.PATTERN))

        if self._uuid_interface is not None and is_uuid_value(message):
            uuid_interface = MessageInterface(
                name=qualify_interface(self._uuid_interface, proto_file),
                parameters=(IdentityParameter(),),
            )
            bindings.append(InterfaceBinding(uuid_interface, BindingOrigin.UUID))

        for binding in bindings:
            logger.debug("%s implements %s (%s)", message.full_name, binding.interface.name, binding.origin.value)
        return bindings


def classify(
    message: MessageDecl, proto_file: ProtoFile, config: ProtomarkConfig | None = None
) -> list[InterfaceBinding]:
    """Classify a single message. See :meth:`InterfaceClassifier.classify`."""
    return InterfaceClassifier(config).classify(message, proto_file)
