# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""References to (possibly nested) fields of a message.

A field reference is a dot-separated path of field names. A leading
``context`` token qualifies the reference to the envelope of a message
rather than the message itself::

    comment                 field of the same message
    pkg.Bar.comment         field of the message ``pkg.Bar``
    details.author.name     nested field
    context.timestamp       field of the envelope
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from protomark.model.declarations import PACKAGE_SEPARATOR, FieldDecl, FieldKind, MessageDecl
from protomark.model.schema import SchemaGraph
from protomark.refs.type_ref import (
    ANY,
    CONTEXT,
    CONTEXT_KEYWORD,
    WILDCARD,
    AnyTypeRef,
    ContextTypeRef,
    InvalidReferenceError,
    TypeRef,
    matches,
)

# ###############
# Public Interface
# ###############

ALTERNATIVE_SEPARATOR = ","


class FieldPath(BaseModel):
    """An ordered, non-empty sequence of field names, outermost first."""

    model_config = ConfigDict(frozen=True)

    segments: tuple[str, ...]

    def __str__(self) -> str:
        return PACKAGE_SEPARATOR.join(self.segments)

    def resolve(self, message: MessageDecl, schema: SchemaGraph | None = None) -> FieldDecl | None:
        """Walk the path from *message*, following message-typed fields.

        Returns None at the first segment that cannot be found. Nested
        segments need *schema* to look up the type of the enclosing field.
        """
        current: MessageDecl | None = message
        found: FieldDecl | None = None
        for index, name in enumerate(self.segments):
            if current is None:
                return None
            found = current.field(name)
            if found is None:
                return None
            if index < len(self.segments) - 1:
                current = _field_message(found, schema)
        return found


class FieldRef(BaseModel):
    """A reference to a field, qualified by the type it belongs to.

    Attributes:
        value: The reference text as written in the option.
        qualifier: ``AnyTypeRef`` for plain references, ``ContextTypeRef``
            for references into the envelope.
        path: The field path following the qualifier.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    qualifier: TypeRef
    path: FieldPath

    @classmethod
    def parse(cls, raw: str) -> FieldRef:
        """Parse a single field reference.

        Raises:
            InvalidReferenceError: For blank text, wildcards, or empty segments.
        """
        value = raw.strip() if raw else ""
        if not value:
            raise InvalidReferenceError("A field reference cannot be empty or blank")
        if WILDCARD in value:
            raise InvalidReferenceError(f"Field reference cannot be wildcard. Found: `{value}`.")
        parts = [part.strip() for part in value.split(PACKAGE_SEPARATOR)]
        if any(not part for part in parts):
            raise InvalidReferenceError(f"The value (`{value}`) is not a valid field reference.")
        qualifier: TypeRef = ANY
        if parts[0] == CONTEXT_KEYWORD:
            qualifier = CONTEXT
            parts = parts[1:]
        if not parts:
            raise InvalidReferenceError(f"The value (`{value}`) does not name a field.")
        return cls(value=value, qualifier=qualifier, path=FieldPath(segments=tuple(parts)))

    @classmethod
    def parse_all(cls, raw: str) -> list[FieldRef]:
        """Parse a comma-separated list of alternatives, preserving their order."""
        return [cls.parse(part) for part in raw.split(ALTERNATIVE_SEPARATOR)]

    def field_name(self) -> str:
        """The name of the innermost referenced field."""
        return self.path.segments[-1]

    def is_inner(self) -> bool:
        return isinstance(self.qualifier, AnyTypeRef)

    def is_context(self) -> bool:
        return isinstance(self.qualifier, ContextTypeRef)

    def find(self, message: MessageDecl, schema: SchemaGraph | None = None) -> FieldDecl | None:
        """Resolve this reference against *message*.

        The plain path is tried first. For non-context references whose
        leading segments name *message* itself (fully-qualified or relative
        to its package), the remaining segments are resolved next.
        Not finding a field is a normal outcome and yields None.
        """
        found = self.path.resolve(message, schema)
        if found is not None or self.is_context():
            return found
        segments = self.path.segments
        for split in range(len(segments) - 1, 0, -1):
            type_name = PACKAGE_SEPARATOR.join(segments[:split])
            if type_name in (message.full_name, message.nested_name):
                return FieldPath(segments=segments[split:]).resolve(message, schema)
        return None

    def matches_type(self, message: MessageDecl, schema: SchemaGraph | None = None) -> bool:
        """Tell whether the qualifier accepts *message* and the field exists in it."""
        return matches(self.qualifier, message) and self.find(message, schema) is not None

    def __str__(self) -> str:
        return self.value


# ################
# Implementation
# ################


def _field_message(field_decl: FieldDecl, schema: SchemaGraph | None) -> MessageDecl | None:
    if field_decl.kind is not FieldKind.MESSAGE or field_decl.type_name is None or schema is None:
        return None
    return schema.find_message(field_decl.type_name)
