# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""The schema graph: every file of a resolution run, indexed by full name."""

from __future__ import annotations

from collections.abc import Iterator

from protomark.model.declarations import MessageDecl, ProtoFile

# ###############
# Public Interface
# ###############


class SchemaGraph:
    """An immutable collection of schema files with name lookups.

    Messages are indexed by fully-qualified name. When the same name is
    declared twice, the first declaration wins for lookups; duplicates are
    reported by :func:`protomark.validation.validate`.
    """

    def __init__(self, files: list[ProtoFile]) -> None:
        self._files = tuple(files)
        self._messages: dict[str, MessageDecl] = {}
        self._owners: dict[str, ProtoFile] = {}
        self._enums: set[str] = set()
        for proto_file in self._files:
            self._enums.update(proto_file.enums)
            for message in _walk(proto_file.messages):
                self._messages.setdefault(message.full_name, message)
                self._owners.setdefault(message.full_name, proto_file)

    @property
    def files(self) -> tuple[ProtoFile, ...]:
        return self._files

    def messages(self) -> Iterator[MessageDecl]:
        """Yield every message declaration, files in order, parents before nested types."""
        for proto_file in self._files:
            yield from _walk(proto_file.messages)

    def declarations(self) -> Iterator[tuple[ProtoFile, MessageDecl]]:
        """Yield every message with the file that declares it, in the order of :meth:`messages`.

        Unlike :meth:`file_of`, a name declared in several files is paired
        with each of its own files.
        """
        for proto_file in self._files:
            for message in _walk(proto_file.messages):
                yield proto_file, message

    def find_message(self, full_name: str) -> MessageDecl | None:
        return self._messages.get(full_name.lstrip("."))

    def is_enum(self, full_name: str) -> bool:
        return full_name.lstrip(".") in self._enums

    def file_of(self, message: MessageDecl) -> ProtoFile:
        """Return the file declaring *message*.

        Raises:
            KeyError: If the message does not belong to this graph.
        """
        try:
            return self._owners[message.full_name]
        except KeyError:
            raise KeyError(f"Message '{message.full_name}' is not part of the schema") from None

    def __len__(self) -> int:
        return len(self._messages)


# ################
# Implementation
# ################


def _walk(messages: list[MessageDecl]) -> Iterator[MessageDecl]:
    for message in messages:
        yield message
        yield from _walk(message.nested)
