# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enrichment declarations and their field matches against source messages."""

from protomark.enrichment.enrichment_type import (
    BY_OPTION,
    ENRICHMENT_FOR_OPTION,
    AmbiguousReferenceError,
    EnrichmentError,
    EnrichmentType,
    FieldDef,
    MissingOptionError,
    UnresolvableReferenceError,
    is_enrichment,
)
from protomark.enrichment.field_match import (
    EnrichmentResult,
    FieldMatch,
    FieldResolution,
    FieldSource,
    MatchFailure,
    Resolved,
    ResolvedViaContext,
    Unresolved,
    match_enrichment,
    resolve_field,
)

__all__ = [
    "BY_OPTION",
    "ENRICHMENT_FOR_OPTION",
    "EnrichmentError",
    "MissingOptionError",
    "AmbiguousReferenceError",
    "UnresolvableReferenceError",
    "EnrichmentType",
    "FieldDef",
    "is_enrichment",
    "FieldSource",
    "FieldMatch",
    "FieldResolution",
    "Resolved",
    "ResolvedViaContext",
    "Unresolved",
    "MatchFailure",
    "EnrichmentResult",
    "match_enrichment",
    "resolve_field",
]
