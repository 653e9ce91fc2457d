# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of resolution artifacts.

Artifacts are compact JSON documents handed to the code emitter. The format
is versioned so future schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from protomark.compiler.engine import EnrichmentRecord, FieldBinding, ResolutionError, ResolutionResult
from protomark.interfaces.directives import InsertionPoint

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".protomark.json"


def serialize(result: ResolutionResult) -> str:
    """Serialize a resolution result to a compact JSON string."""
    return json.dumps(_result_to_dict(result), separators=(",", ":"))


def deserialize(data: str) -> ResolutionResult:
    """Deserialize a resolution result from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`ResolutionResult`.

    Raises:
        ValueError: If the data is not an artifact or its format version is
            not recognised.
    """
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError("Artifact must be a JSON object")
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    return _result_from_dict(obj)


def write_artifact(result: ResolutionResult, path: Path) -> None:
    """Write an artifact to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(result), encoding="utf-8")


def read_artifact(path: Path) -> ResolutionResult:
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    return {
        "v": ARTIFACT_FORMAT_VERSION,
        "directives": [_directive_to_dict(d) for d in result.directives],
        "declarations": [_directive_to_dict(d) for d in result.declarations],
        "enrichments": [_enrichment_to_dict(e) for e in result.enrichments],
        "errors": [_error_to_dict(e) for e in result.errors],
    }


def _result_from_dict(obj: dict[str, Any]) -> ResolutionResult:
    return ResolutionResult(
        directives=[_directive_from_dict(d) for d in obj.get("directives", [])],
        declarations=[_directive_from_dict(d) for d in obj.get("declarations", [])],
        enrichments=[_enrichment_from_dict(e) for e in obj.get("enrichments", [])],
        errors=[_error_from_dict(e) for e in obj.get("errors", [])],
    )


def _directive_to_dict(directive: InsertionPoint) -> dict[str, str]:
    return {"target": directive.target, "marker": directive.marker, "content": directive.content}


def _directive_from_dict(obj: dict[str, Any]) -> InsertionPoint:
    return InsertionPoint(target=obj["target"], marker=obj["marker"], content=obj["content"])


def _enrichment_to_dict(record: EnrichmentRecord) -> dict[str, Any]:
    fields: list[dict[str, Any]] = []
    for name, binding in record.fields.items():
        d: dict[str, Any] = {"name": name, "by": binding.ref}
        if binding.field is not None:
            d["from"] = binding.field
        fields.append(d)
    return {"enrichment": record.enrichment, "source": record.source, "fields": fields}


def _enrichment_from_dict(obj: dict[str, Any]) -> EnrichmentRecord:
    return EnrichmentRecord(
        enrichment=obj["enrichment"],
        source=obj["source"],
        fields={f["name"]: FieldBinding(field=f.get("from"), ref=f["by"]) for f in obj.get("fields", [])},
    )


def _error_to_dict(error: ResolutionError) -> dict[str, Any]:
    d: dict[str, Any] = {"declaration": error.declaration, "category": error.category, "message": error.message}
    if error.source is not None:
        d["source"] = error.source
    return d


def _error_from_dict(obj: dict[str, Any]) -> ResolutionError:
    return ResolutionError(
        declaration=obj["declaration"],
        source=obj.get("source"),
        category=obj["category"],
        message=obj["message"],
    )
