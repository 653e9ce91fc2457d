# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Matching enrichment fields to the fields of their source messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from protomark.enrichment.enrichment_type import (
    BY_OPTION,
    ENRICHMENT_FOR_OPTION,
    EnrichmentError,
    EnrichmentType,
    FieldDef,
    MissingOptionError,
    UnresolvableReferenceError,
)
from protomark.model.declarations import FieldDecl, MessageDecl
from protomark.model.schema import SchemaGraph
from protomark.refs.field_ref import FieldRef
from protomark.refs.type_ref import InvalidReferenceError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Resolved:
    """An alternative found a concrete field in the source."""

    source_field: FieldDecl
    ref: FieldRef


@dataclass(frozen=True)
class ResolvedViaContext:
    """No concrete field was found; the value comes from the envelope."""

    ref: FieldRef


@dataclass(frozen=True)
class Unresolved:
    """None of the alternatives applies."""

    attempted: tuple[FieldRef, ...]


FieldResolution = Resolved | ResolvedViaContext | Unresolved


@dataclass(frozen=True)
class FieldSource:
    """Where the value of an enrichment field comes from.

    Attributes:
        field: The source field, or None for a context-derived value.
        ref: The alternative that produced the binding.
    """

    field: FieldDecl | None
    ref: FieldRef

    @property
    def is_context(self) -> bool:
        return self.field is None


def resolve_field(field_def: FieldDef, source: MessageDecl, schema: SchemaGraph | None = None) -> FieldResolution:
    """Resolve one enrichment field against *source*.

    Alternatives are tried in declaration order and the first one that finds
    a concrete field wins. Context references are only used as a fallback.
    """
    for ref in field_def.refs:
        if ref.is_context():
            continue
        found = ref.find(source, schema)
        if found is not None:
            return Resolved(source_field=found, ref=ref)
    context_ref = field_def.context_ref
    if context_ref is not None:
        return ResolvedViaContext(ref=context_ref)
    return Unresolved(attempted=field_def.refs)


@dataclass(frozen=True)
class FieldMatch:
    """A total mapping from enrichment fields to their sources for one source message.

    Attributes:
        source: The message being enriched.
        enrichment: The enrichment message.
        sources: Field name of the enrichment to its :class:`FieldSource`, in
            enrichment field order.
    """

    source: MessageDecl
    enrichment: MessageDecl
    sources: dict[str, FieldSource] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        source: MessageDecl,
        enrichment_type: EnrichmentType,
        schema: SchemaGraph | None = None,
    ) -> FieldMatch:
        """Match every field of *enrichment_type* against *source*.

        Raises:
            MissingOptionError: If the enrichment has no fields.
            UnresolvableReferenceError: If any field cannot be resolved. No
                partial mapping is produced.
        """
        enrichment = enrichment_type.message
        if not enrichment_type.fields:
            raise MissingOptionError(f"Enrichment `{enrichment.full_name}` declares no fields.")
        sources: dict[str, FieldSource] = {}
        for field_def in enrichment_type.fields:
            resolution = resolve_field(field_def, source, schema)
            if isinstance(resolution, Resolved):
                sources[field_def.field.name] = FieldSource(field=resolution.source_field, ref=resolution.ref)
            elif isinstance(resolution, ResolvedViaContext):
                sources[field_def.field.name] = FieldSource(field=None, ref=resolution.ref)
            else:
                attempted = ", ".join(f"`{ref}`" for ref in resolution.attempted)
                raise UnresolvableReferenceError(
                    f"Unable to resolve field `{field_def.field.name}` of enrichment"
                    f" `{enrichment.full_name}` in `{source.full_name}`; tried: {attempted}."
                )
        return cls(source=source, enrichment=enrichment, sources=sources)

    def source_of(self, field_name: str) -> FieldSource:
        """Return the source of the enrichment field *field_name*.

        Raises:
            KeyError: If the enrichment has no such field.
        """
        return self.sources[field_name]


@dataclass(frozen=True)
class MatchFailure:
    """A rejected enrichment binding.

    Attributes:
        enrichment: Full name of the enrichment.
        source: Full name of the source, or None when the enrichment itself
            is malformed.
        message: Human-readable description of the failure.
        error: The exception that caused the failure.
    """

    enrichment: str
    source: str | None
    message: str
    error: Exception | None = field(default=None, compare=False, repr=False)


@dataclass
class EnrichmentResult:
    """All bindings computed for one enrichment message."""

    enrichment: str
    matches: list[FieldMatch] = field(default_factory=list)
    failures: list[MatchFailure] = field(default_factory=list)


def match_enrichment(
    message: MessageDecl,
    schema: SchemaGraph,
    *,
    source_option: str = ENRICHMENT_FOR_OPTION,
    by_option: str = BY_OPTION,
) -> EnrichmentResult:
    """Compute field matches of enrichment *message* for all of its sources.

    Malformed enrichments produce a single failure with no source. Each
    source whose mapping cannot be completed produces a failure of its own;
    the remaining sources are still matched.
    """
    result = EnrichmentResult(enrichment=message.full_name)
    try:
        enrichment_type = EnrichmentType(message, source_option=source_option, by_option=by_option)
    except (InvalidReferenceError, EnrichmentError) as exc:
        result.failures.append(
            MatchFailure(enrichment=message.full_name, source=None, message=str(exc), error=exc)
        )
        return result

    for source in enrichment_type.source_types(schema):
        try:
            result.matches.append(FieldMatch.build(source, enrichment_type, schema))
        except EnrichmentError as exc:
            logger.warning("Rejected enrichment %s for %s: %s", message.full_name, source.full_name, exc)
            result.failures.append(
                MatchFailure(enrichment=message.full_name, source=source.full_name, message=str(exc), error=exc)
            )
        else:
            logger.debug("Matched enrichment %s to source %s", message.full_name, source.full_name)
    return result
