# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural checks of ProtoMark schemas."""

from protomark.validation.checks import ValidationError, ValidationResult, ValidationWarning, validate

__all__ = ["ValidationError", "ValidationResult", "ValidationWarning", "validate"]
