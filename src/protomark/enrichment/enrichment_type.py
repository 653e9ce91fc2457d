# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enrichment declarations and the field references they declare.

An enrichment is a message that carries extra data alongside the messages
it is declared for. The ``enrichment_for`` option names the source messages
and the ``by`` option of each field lists where its value comes from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from protomark.model.declarations import FieldDecl, MessageDecl
from protomark.model.schema import SchemaGraph
from protomark.refs.field_ref import FieldRef
from protomark.refs.type_ref import TypeRef, matches, ref_value, type_ref_from, with_package

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

ENRICHMENT_FOR_OPTION = "enrichment_for"
BY_OPTION = "by"


class EnrichmentError(Exception):
    """Base class for structural errors in enrichment declarations."""


class MissingOptionError(EnrichmentError):
    """Raised when an enrichment lacks its source option or has no fields."""


class AmbiguousReferenceError(EnrichmentError):
    """Raised when a field declares more than one context reference."""


class UnresolvableReferenceError(EnrichmentError):
    """Raised when no alternative of a field resolves against a source."""


def is_enrichment(message: MessageDecl, option_name: str = ENRICHMENT_FOR_OPTION) -> bool:
    """Tell whether *message* carries a non-empty enrichment option."""
    return bool(message.options.get(option_name, "").strip())


@dataclass(frozen=True)
class FieldDef:
    """An enrichment field and its ordered ``by`` alternatives.

    Attributes:
        field: The enrichment field.
        refs: Alternatives in declaration order. The first one that resolves wins.
    """

    field: FieldDecl
    refs: tuple[FieldRef, ...]

    @classmethod
    def of(cls, field_decl: FieldDecl, option_name: str = BY_OPTION) -> FieldDef:
        """Build the definition from the field's ``by`` option.

        A field without the option is supplied by the source field of the
        same name.

        Raises:
            InvalidReferenceError: If an alternative is malformed.
            AmbiguousReferenceError: If more than one alternative is a
                context reference.
        """
        raw = field_decl.options.get(option_name, "").strip()
        refs = FieldRef.parse_all(raw) if raw else [FieldRef.parse(field_decl.name)]
        context_refs = [ref for ref in refs if ref.is_context()]
        if len(context_refs) > 1:
            listed = ", ".join(f"`{ref}`" for ref in context_refs)
            raise AmbiguousReferenceError(
                f"Field `{field_decl.name}` has more than one context reference: {listed}."
            )
        return cls(field=field_decl, refs=tuple(refs))

    @property
    def context_ref(self) -> FieldRef | None:
        for ref in self.refs:
            if ref.is_context():
                return ref
        return None

    def matches_type(self, message: MessageDecl, schema: SchemaGraph | None = None) -> bool:
        """Tell whether any alternative finds its field in *message*."""
        return any(ref.matches_type(message, schema) for ref in self.refs)


class EnrichmentType:
    """A message declared as an enrichment for one or more source messages.

    Source references without a package are relocated to the package of the
    enrichment, so that ``enrichment_for: "OrderPlaced"`` refers to a sibling.
    """

    def __init__(
        self,
        message: MessageDecl,
        *,
        source_option: str = ENRICHMENT_FOR_OPTION,
        by_option: str = BY_OPTION,
    ) -> None:
        """Parse the enrichment options of *message*.

        Raises:
            MissingOptionError: If the source option is absent or blank, or
                the message declares no fields.
            InvalidReferenceError: If a source or field reference is malformed.
            AmbiguousReferenceError: If a field has several context references.
        """
        raw = message.options.get(source_option, "").strip()
        if not raw:
            raise MissingOptionError(
                f"Message `{message.full_name}` has no `{source_option}` option and cannot be an enrichment."
            )
        if not message.fields:
            raise MissingOptionError(f"Enrichment `{message.full_name}` declares no fields.")
        self._message = message
        self._source_refs: tuple[TypeRef, ...] = (with_package(type_ref_from(raw), message.package),)
        self._fields = tuple(FieldDef.of(field_decl, by_option) for field_decl in message.fields)

    @property
    def message(self) -> MessageDecl:
        return self._message

    @property
    def source_refs(self) -> tuple[TypeRef, ...]:
        return self._source_refs

    @property
    def fields(self) -> tuple[FieldDef, ...]:
        return self._fields

    def is_source(self, message: MessageDecl) -> bool:
        """Tell whether any source reference matches *message*."""
        return any(matches(ref, message) for ref in self._source_refs)

    def source_types(self, schema: SchemaGraph) -> list[MessageDecl]:
        """Return the messages this enrichment can be built for.

        A candidate is matched by a source reference and has at least one
        field referenced by the ``by`` alternatives. The enrichment itself
        is never its own source.
        """
        result = [
            message
            for message in schema.messages()
            if message.full_name != self._message.full_name
            and self.is_source(message)
            and any(field_def.matches_type(message, schema) for field_def in self._fields)
        ]
        if not result:
            logger.debug(
                "No source types found for enrichment %s (refs: %s)",
                self._message.full_name,
                ", ".join(ref_value(ref) for ref in self._source_refs),
            )
        return result

    def __repr__(self) -> str:
        return f"EnrichmentType({self._message.full_name!r})"
