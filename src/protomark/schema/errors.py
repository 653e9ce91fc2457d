# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0


class SchemaLoadError(Exception):
    """Raised when a schema input cannot be read or decoded."""
