# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of a whole schema into directives and enrichment records.

Each message is an independent unit: it is classified against the
interfaces it implements and, when it is an enrichment, matched to its
sources. Units run on a thread pool and their results are collected in
schema order, so the output does not depend on scheduling.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from protomark.config.settings import ProtomarkConfig
from protomark.enrichment.enrichment_type import is_enrichment
from protomark.enrichment.field_match import FieldMatch, MatchFailure, match_enrichment
from protomark.interfaces.directives import InsertionPoint, emit_declarations, emit_directives
from protomark.interfaces.scanner import InterfaceClassifier
from protomark.model.declarations import MessageDecl, ProtoFile
from protomark.model.schema import SchemaGraph

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class FieldBinding:
    """Where one enrichment field takes its value from.

    Attributes:
        field: Name of the source field, or None when the value comes from
            the context.
        ref: The ``by`` alternative that produced the binding.
    """

    field: str | None
    ref: str


@dataclass(frozen=True)
class EnrichmentRecord:
    """The field mapping of one enrichment for one source message."""

    enrichment: str
    source: str
    fields: dict[str, FieldBinding]

    @classmethod
    def from_match(cls, match: FieldMatch) -> EnrichmentRecord:
        return cls(
            enrichment=match.enrichment.full_name,
            source=match.source.full_name,
            fields={
                name: FieldBinding(field=None if src.field is None else src.field.name, ref=str(src.ref))
                for name, src in match.sources.items()
            },
        )


@dataclass(frozen=True)
class ResolutionError:
    """A structural error found while resolving one declaration.

    Attributes:
        declaration: Full name of the offending declaration.
        source: Full name of the rejected source, if the error concerns a
            single enrichment binding.
        category: Name of the error type, e.g. ``UnresolvableReferenceError``.
        message: Human-readable description.
    """

    declaration: str
    source: str | None
    category: str
    message: str


@dataclass
class ResolutionResult:
    """Everything produced by one resolution run, in schema order.

    *declarations* holds one source per custom interface, in order of first
    use, however many messages implement it.
    """

    directives: list[InsertionPoint] = field(default_factory=list)
    declarations: list[InsertionPoint] = field(default_factory=list)
    enrichments: list[EnrichmentRecord] = field(default_factory=list)
    errors: list[ResolutionError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


@dataclass(frozen=True)
class MessageResolution:
    """The outcome of resolving a single message."""

    directives: tuple[InsertionPoint, ...] = ()
    declarations: tuple[InsertionPoint, ...] = ()
    matches: tuple[FieldMatch, ...] = ()
    failures: tuple[MatchFailure, ...] = ()


def resolve_message(
    message: MessageDecl,
    schema: SchemaGraph,
    config: ProtomarkConfig | None = None,
    *,
    classifier: InterfaceClassifier | None = None,
    proto_file: ProtoFile | None = None,
) -> MessageResolution:
    """Classify *message* and, if it is an enrichment, match it to its sources.

    Pure with respect to its inputs: resolving the same message twice yields
    equal results. *proto_file* is the declaring file; it defaults to the
    owner registered in *schema*, which is ambiguous for duplicate names.
    """
    config = config or ProtomarkConfig()
    classifier = classifier or InterfaceClassifier(config)
    if proto_file is None:
        proto_file = schema.file_of(message)
    bindings = classifier.classify(message, proto_file)
    directives = tuple(emit_directives(message, proto_file, bindings))
    declarations = tuple(emit_declarations(bindings))

    if not is_enrichment(message, config.options.enrichment_for):
        return MessageResolution(directives=directives, declarations=declarations)
    enrichment = match_enrichment(
        message,
        schema,
        source_option=config.options.enrichment_for,
        by_option=config.options.by,
    )
    return MessageResolution(
        directives=directives,
        declarations=declarations,
        matches=tuple(enrichment.matches),
        failures=tuple(enrichment.failures),
    )


def resolve_schema(
    schema: SchemaGraph,
    config: ProtomarkConfig | None = None,
    *,
    max_workers: int | None = None,
    fail_fast: bool = False,
) -> ResolutionResult:
    """Resolve every message of *schema*.

    Args:
        schema: The schema graph to resolve.
        config: Run configuration. Defaults apply when omitted.
        max_workers: Size of the worker pool. ``1`` resolves on the calling
            thread; None lets the executor choose.
        fail_fast: Re-raise the first error, in schema order, instead of
            recording it. Messages not yet started are not resolved.

    Returns:
        Directives, enrichment records and errors, all in schema order.

    Raises:
        EnrichmentError: Only with *fail_fast*, for the first malformed
            enrichment or rejected binding.
        InvalidReferenceError: Only with *fail_fast*, for the first
            malformed reference.
    """
    config = config or ProtomarkConfig()
    classifier = InterfaceClassifier(config)
    declarations = list(schema.declarations())
    result = ResolutionResult()

    if max_workers == 1:
        for proto_file, message in declarations:
            resolution = resolve_message(message, schema, config, classifier=classifier, proto_file=proto_file)
            _collect(result, resolution, fail_fast)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures: list[Future[MessageResolution]] = [
                executor.submit(
                    resolve_message, message, schema, config, classifier=classifier, proto_file=proto_file
                )
                for proto_file, message in declarations
            ]
            try:
                for future in futures:
                    _collect(result, future.result(), fail_fast)
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise

    logger.info(
        "Resolved %d messages: %d directives, %d interface declarations, %d enrichment records, %d errors",
        len(declarations),
        len(result.directives),
        len(result.declarations),
        len(result.enrichments),
        len(result.errors),
    )
    return result


# ################
# Implementation
# ################


def _collect(result: ResolutionResult, resolution: MessageResolution, fail_fast: bool) -> None:
    for failure in resolution.failures:
        if fail_fast and failure.error is not None:
            raise failure.error
        result.errors.append(_to_error(failure))
    result.directives.extend(resolution.directives)
    declared = {declaration.target for declaration in result.declarations}
    for declaration in resolution.declarations:
        if declaration.target not in declared:
            declared.add(declaration.target)
            result.declarations.append(declaration)
    result.enrichments.extend(EnrichmentRecord.from_match(match) for match in resolution.matches)


def _to_error(failure: MatchFailure) -> ResolutionError:
    category = type(failure.error).__name__ if failure.error is not None else "EnrichmentError"
    return ResolutionError(
        declaration=failure.enrichment,
        source=failure.source,
        category=category,
        message=failure.message,
    )
