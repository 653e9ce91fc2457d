# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the ProtoMark documentation."""

project = "ProtoMark"
author = "ProtoMark Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]
autodoc_typehints = "description"

html_theme = "alabaster"
