# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration of a ProtoMark run."""

from protomark.config.settings import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    ConfigError,
    OptionNames,
    OptionNumbers,
    PatternRule,
    ProtomarkConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG_TEXT",
    "ConfigError",
    "OptionNames",
    "OptionNumbers",
    "PatternRule",
    "ProtomarkConfig",
    "load_config",
    "parse_config",
]
