# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution engine and its JSON artifact."""

from protomark.compiler.artifact import (
    ARTIFACT_FORMAT_VERSION,
    ARTIFACT_SUFFIX,
    deserialize,
    read_artifact,
    serialize,
    write_artifact,
)
from protomark.compiler.engine import (
    EnrichmentRecord,
    FieldBinding,
    MessageResolution,
    ResolutionError,
    ResolutionResult,
    resolve_message,
    resolve_schema,
)

__all__ = [
    "ARTIFACT_FORMAT_VERSION",
    "ARTIFACT_SUFFIX",
    "deserialize",
    "read_artifact",
    "serialize",
    "write_artifact",
    "EnrichmentRecord",
    "FieldBinding",
    "MessageResolution",
    "ResolutionError",
    "ResolutionResult",
    "resolve_message",
    "resolve_schema",
]
