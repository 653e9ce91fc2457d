# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading schema inputs from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from protomark.config.settings import ProtomarkConfig
from protomark.model.schema import SchemaGraph
from protomark.schema.descriptor_set import parse_descriptor_set
from protomark.schema.document import parse_schema_document
from protomark.schema.errors import SchemaLoadError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DOCUMENT_SUFFIXES = frozenset({".yaml", ".yml", ".json"})


def load_schema(path: Path, config: ProtomarkConfig | None = None) -> SchemaGraph:
    """Load a schema document or a binary descriptor set from *path*.

    Files ending in ``.yaml``, ``.yml`` or ``.json`` are read as schema
    documents; anything else is decoded as a ``FileDescriptorSet`` using
    the option numbers of *config*.

    Raises:
        SchemaLoadError: If the file cannot be read or decoded.
    """
    config = config or ProtomarkConfig()
    try:
        if path.suffix.lower() in DOCUMENT_SUFFIXES:
            schema = parse_schema_document(path.read_text(encoding="utf-8"), source_label=str(path))
        else:
            schema = parse_descriptor_set(path.read_bytes(), config.options, config.option_numbers)
    except FileNotFoundError:
        raise SchemaLoadError(f"Schema file not found: {path}") from None
    except OSError as exc:
        raise SchemaLoadError(f"Cannot read schema file: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SchemaLoadError(f"Schema document {path} is not valid UTF-8") from exc

    logger.info("Loaded %d files with %d messages from %s", len(schema.files), len(schema), path)
    return schema
