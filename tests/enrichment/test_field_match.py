# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for matching enrichment fields against source messages."""

import pytest

from protomark.enrichment import (
    EnrichmentType,
    FieldDef,
    FieldMatch,
    MissingOptionError,
    Resolved,
    ResolvedViaContext,
    UnresolvableReferenceError,
    Unresolved,
    match_enrichment,
    resolve_field,
)
from protomark.model import FieldDecl, FieldKind, MessageDecl, ProtoFile, SchemaGraph

# ###############
# Test Helpers
# ###############


def _field(name: str, by: str | None = None) -> FieldDecl:
    options = {"by": by} if by is not None else {}
    return FieldDecl(name=name, kind=FieldKind.SCALAR, scalar_type="string", options=options)


def _message(name: str, package: str, fields: list[FieldDecl], **options: str) -> MessageDecl:
    return MessageDecl(
        name=name,
        full_name=f"{package}.{name}" if package else name,
        package=package,
        fields=fields,
        options=options,
    )


def _schema(*files: tuple[str, str, list[MessageDecl]]) -> SchemaGraph:
    return SchemaGraph([ProtoFile(path=path, package=package, messages=messages) for path, package, messages in files])


# ###############
# Field Resolution
# ###############


class TestResolveField:
    def test_first_resolving_alternative_wins(self) -> None:
        source = _message("Bar", "pkg", [_field("comment"), _field("remark")])
        field_def = FieldDef.of(_field("note", by="missing, remark, comment"))
        resolution = resolve_field(field_def, source)
        assert isinstance(resolution, Resolved)
        assert resolution.source_field.name == "remark"
        assert str(resolution.ref) == "remark"

    def test_concrete_field_beats_earlier_context_alternative(self) -> None:
        source = _message("Bar", "pkg", [_field("comment")])
        field_def = FieldDef.of(_field("note", by="context.note, comment"))
        resolution = resolve_field(field_def, source)
        assert isinstance(resolution, Resolved)
        assert resolution.source_field.name == "comment"

    def test_falls_back_to_context(self) -> None:
        source = _message("A", "pkg", [_field("other")])
        field_def = FieldDef.of(_field("value", by="A.x, context.y"))
        resolution = resolve_field(field_def, source)
        assert isinstance(resolution, ResolvedViaContext)
        assert str(resolution.ref) == "context.y"

    def test_unresolved_lists_every_alternative(self) -> None:
        source = _message("A", "pkg", [_field("other")])
        field_def = FieldDef.of(_field("value", by="A.x, z"))
        resolution = resolve_field(field_def, source)
        assert isinstance(resolution, Unresolved)
        assert [str(ref) for ref in resolution.attempted] == ["A.x", "z"]


# ###############
# Field Matches
# ###############


class TestFieldMatch:
    def test_context_source_has_no_field(self) -> None:
        source = _message("A", "pkg", [_field("other")])
        enrichment = _message("E", "pkg", [_field("value", by="A.x, context.y")], enrichment_for="A")
        match = FieldMatch.build(source, EnrichmentType(enrichment))
        field_source = match.source_of("value")
        assert field_source.is_context
        assert field_source.field is None
        assert str(field_source.ref) == "context.y"

    def test_pair_is_rejected_when_any_field_is_unresolved(self) -> None:
        source = _message("A", "pkg", [_field("x")])
        enrichment = _message("E", "pkg", [_field("first", by="x"), _field("second", by="y, A.z")], enrichment_for="A")
        with pytest.raises(UnresolvableReferenceError) as exc_info:
            FieldMatch.build(source, EnrichmentType(enrichment))
        message = str(exc_info.value)
        assert "second" in message
        assert "`y`" in message
        assert "`A.z`" in message

    def test_sources_follow_enrichment_field_order(self) -> None:
        source = _message("A", "pkg", [_field("x"), _field("y")])
        enrichment = _message("E", "pkg", [_field("y"), _field("x")], enrichment_for="A")
        match = FieldMatch.build(source, EnrichmentType(enrichment))
        assert list(match.sources) == ["y", "x"]

    def test_unknown_field_name(self) -> None:
        source = _message("A", "pkg", [_field("x")])
        match = FieldMatch.build(source, EnrichmentType(_message("E", "pkg", [_field("x")], enrichment_for="A")))
        with pytest.raises(KeyError):
            match.source_of("missing")


# ###############
# Enrichment Matching
# ###############


class TestMatchEnrichment:
    def test_foo_enriches_bar(self) -> None:
        foo = _message("Foo", "", [_field("note", by="pkg.Bar.comment")], enrichment_for="pkg.Bar")
        bar = _message("Bar", "pkg", [_field("comment")])
        schema = _schema(("foo.proto", "", [foo]), ("pkg/bar.proto", "pkg", [bar]))

        result = match_enrichment(foo, schema)

        assert result.failures == []
        assert len(result.matches) == 1
        match = result.matches[0]
        assert match.source.full_name == "pkg.Bar"
        assert match.enrichment.full_name == "Foo"
        field_source = match.source_of("note")
        assert field_source.field is not None
        assert field_source.field.name == "comment"

    def test_custom_option_names(self) -> None:
        foo = MessageDecl(
            name="Foo",
            full_name="Foo",
            fields=[FieldDecl(name="note", scalar_type="string", options={"via": "pkg.Bar.comment"})],
            options={"derived_from": "pkg.Bar"},
        )
        bar = _message("Bar", "pkg", [_field("comment")])
        schema = _schema(("foo.proto", "", [foo]), ("pkg/bar.proto", "pkg", [bar]))
        result = match_enrichment(foo, schema, source_option="derived_from", by_option="via")
        assert len(result.matches) == 1

    def test_malformed_enrichment_is_a_single_failure(self) -> None:
        foo = _message("Foo", "acme", [], enrichment_for="Bar")
        result = match_enrichment(foo, _schema(("acme/foo.proto", "acme", [foo])))
        assert result.matches == []
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.source is None
        assert isinstance(failure.error, MissingOptionError)

    def test_rejected_source_does_not_stop_others(self) -> None:
        enrichment = _message(
            "Info",
            "acme",
            [_field("name"), _field("code")],
            enrichment_for="acme.*",
        )
        complete = _message("Complete", "acme", [_field("name"), _field("code")])
        partial = _message("Partial", "acme", [_field("name")])
        schema = _schema(("acme/types.proto", "acme", [enrichment, partial, complete]))

        result = match_enrichment(enrichment, schema)

        assert [m.source.full_name for m in result.matches] == ["acme.Complete"]
        assert [f.source for f in result.failures] == ["acme.Partial"]
        assert isinstance(result.failures[0].error, UnresolvableReferenceError)

    def test_failures_compare_without_error(self) -> None:
        enrichment = _message("Info", "acme", [_field("name"), _field("code")], enrichment_for="acme.*")
        partial = _message("Partial", "acme", [_field("name")])
        schema = _schema(("acme/types.proto", "acme", [enrichment, partial]))
        assert match_enrichment(enrichment, schema) == match_enrichment(enrichment, schema)
