# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the ProtoMark configuration file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".protomark.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


class PatternRule(BaseModel):
    """Marks top-level messages of files whose path contains *suffix* with *interface*.

    A rule with an empty interface is kept but never applied.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    suffix: str
    interface: str = ""

    @field_validator("suffix")
    @classmethod
    def _suffix_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("pattern suffix cannot be blank")
        return value


class OptionNames(BaseModel):
    """Names of the schema options read by the engine."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    enrichment_for: str = Field(alias="enrichment-for", default="enrichment_for")
    by: str = "by"
    is_: str = Field(alias="is", default="is")
    every_is: str = Field(alias="every-is", default="every_is")


class OptionNumbers(BaseModel):
    """Extension field numbers of the custom options in binary descriptor sets."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    enrichment_for: int = Field(alias="enrichment-for", default=73850)
    by: int = 73851
    is_: int = Field(alias="is", default=73852)
    every_is: int = Field(alias="every-is", default=73853)


class ProtomarkConfig(BaseModel):
    """The parsed configuration of a resolution run.

    Attributes:
        patterns: File pattern rules, tried in order.
        uuid_interface: Interface for UUID-shaped messages, in addition to
            the built-in one. None disables it.
        options: Names of the options read from declarations.
        option_numbers: Field numbers used to decode descriptor sets.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    patterns: tuple[PatternRule, ...] = ()
    uuid_interface: str | None = Field(alias="uuid-interface", default=None)
    options: OptionNames = Field(default_factory=OptionNames)
    option_numbers: OptionNumbers = Field(alias="option-numbers", default_factory=OptionNumbers)


DEFAULT_CONFIG_TEXT = """\
# ProtoMark configuration.
#
# Pattern rules mark top-level messages of matching files with an interface.
patterns:
  - suffix: commands.proto
    interface: ""
  - suffix: events.proto
    interface: ""
# uuid-interface: com.example.UuidValue
options:
  enrichment-for: enrichment_for
  by: by
  is: is
  every-is: every_is
"""


def load_config(path: Path) -> ProtomarkConfig:
    """Load and validate a configuration file.

    An empty file yields the default configuration.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> ProtomarkConfig:
    """Parse configuration YAML text.

    Raises:
        ConfigError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ProtomarkConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    try:
        return ProtomarkConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{source_label}: invalid configuration: {exc}") from exc
