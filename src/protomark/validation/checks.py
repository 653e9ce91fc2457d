# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural checks of a schema graph.

These checks run before resolution and report problems that resolution
itself tolerates: duplicate or dangling names, enrichments that apply to
nothing, and interfaces bound more than once.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from protomark.config.settings import ProtomarkConfig
from protomark.enrichment.enrichment_type import EnrichmentError, EnrichmentType, is_enrichment
from protomark.interfaces.scanner import InterfaceClassifier
from protomark.model.declarations import FieldKind
from protomark.model.schema import SchemaGraph
from protomark.refs.type_ref import InvalidReferenceError

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue. Resolution still produces output for the schema.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal issue. The schema should be corrected before resolution.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the schema checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that indicate an invalid schema.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(schema: SchemaGraph, config: ProtomarkConfig | None = None) -> ValidationResult:
    """Run all schema checks.

    Checks performed:

    1. **Duplicate names** (error): a message or enum full name declared
       more than once across the schema.

    2. **Unresolved field types** (error): a message or enum field whose
       type is not declared in the schema.

    3. **Enrichments without sources** (warning): an enrichment for which no
       message qualifies as a source. Malformed enrichments are left to
       resolution, which reports them with their cause.

    4. **Repeated interfaces** (warning): a message bound to the same
       interface more than once, or to one interface with different generic
       parameters.

    Args:
        schema: The schema graph to check.
        config: Run configuration; defaults apply when omitted.

    Returns:
        A :class:`ValidationResult` with all warnings and errors found.
    """
    config = config or ProtomarkConfig()
    result = ValidationResult()
    result.errors.extend(_check_duplicate_names(schema))
    result.errors.extend(_check_field_types(schema))
    result.warnings.extend(_check_enrichment_sources(schema, config))
    result.warnings.extend(_check_repeated_interfaces(schema, config))
    return result


# ################
# Implementation
# ################


def _check_duplicate_names(schema: SchemaGraph) -> list[ValidationError]:
    names: Counter[str] = Counter(message.full_name for message in schema.messages())
    for proto_file in schema.files:
        names.update(proto_file.enums)
    return [
        ValidationError(message=f"Duplicate declaration '{name}' ({count} definitions)")
        for name, count in names.items()
        if count > 1
    ]


def _check_field_types(schema: SchemaGraph) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for message in schema.messages():
        for field_decl in message.fields:
            if field_decl.kind is FieldKind.SCALAR or field_decl.type_name is None:
                continue
            if schema.find_message(field_decl.type_name) is None and not schema.is_enum(field_decl.type_name):
                errors.append(
                    ValidationError(
                        message=(
                            f"Field '{message.full_name}.{field_decl.name}' refers to undefined type"
                            f" '{field_decl.type_name}'"
                        )
                    )
                )
    return errors


def _check_enrichment_sources(schema: SchemaGraph, config: ProtomarkConfig) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for message in schema.messages():
        if not is_enrichment(message, config.options.enrichment_for):
            continue
        try:
            enrichment_type = EnrichmentType(
                message,
                source_option=config.options.enrichment_for,
                by_option=config.options.by,
            )
        except (InvalidReferenceError, EnrichmentError):
            continue
        if not enrichment_type.source_types(schema):
            warnings.append(ValidationWarning(message=f"Enrichment '{message.full_name}' applies to no message"))
    return warnings


def _check_repeated_interfaces(schema: SchemaGraph, config: ProtomarkConfig) -> list[ValidationWarning]:
    classifier = InterfaceClassifier(config)
    warnings: list[ValidationWarning] = []
    for proto_file, message in schema.declarations():
        seen: dict[str, list[tuple[str, ...]]] = {}
        for binding in classifier.classify(message, proto_file):
            parameters = binding.interface.resolved_parameters(message, proto_file)
            seen.setdefault(binding.interface.name, []).append(parameters)
        for name, variants in seen.items():
            if len(variants) < 2:
                continue
            if len(set(variants)) > 1:
                text = f"Message '{message.full_name}' implements '{name}' with conflicting generic parameters"
            else:
                text = f"Message '{message.full_name}' implements '{name}' {len(variants)} times"
            warnings.append(ValidationWarning(message=text))
    return warnings
