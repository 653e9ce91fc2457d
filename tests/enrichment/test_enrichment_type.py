# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for enrichment declarations and their field definitions."""

import pytest

from protomark.enrichment import (
    AmbiguousReferenceError,
    EnrichmentType,
    FieldDef,
    MissingOptionError,
    is_enrichment,
)
from protomark.model import FieldDecl, FieldKind, MessageDecl, ProtoFile, SchemaGraph
from protomark.refs import DirectTypeRef, InvalidReferenceError, PackageTypeRef

# ###############
# Test Helpers
# ###############


def _field(name: str, by: str | None = None) -> FieldDecl:
    options = {"by": by} if by is not None else {}
    return FieldDecl(name=name, kind=FieldKind.SCALAR, scalar_type="string", options=options)


def _message(name: str, package: str = "acme", fields: list[FieldDecl] | None = None, **options: str) -> MessageDecl:
    return MessageDecl(
        name=name,
        full_name=f"{package}.{name}" if package else name,
        package=package,
        fields=fields or [],
        options=options,
    )


# ###############
# Field Definitions
# ###############


class TestFieldDef:
    def test_defaults_to_field_of_same_name(self) -> None:
        field_def = FieldDef.of(_field("comment"))
        assert [str(ref) for ref in field_def.refs] == ["comment"]
        assert field_def.context_ref is None

    def test_alternatives_keep_declaration_order(self) -> None:
        field_def = FieldDef.of(_field("note", by="Bar.comment, context.note, remark"))
        assert [str(ref) for ref in field_def.refs] == ["Bar.comment", "context.note", "remark"]
        assert field_def.context_ref is not None
        assert str(field_def.context_ref) == "context.note"

    def test_more_than_one_context_alternative_is_ambiguous(self) -> None:
        with pytest.raises(AmbiguousReferenceError, match="note"):
            FieldDef.of(_field("note", by="context.a, context.b"))

    def test_malformed_alternative(self) -> None:
        with pytest.raises(InvalidReferenceError):
            FieldDef.of(_field("note", by="Bar.*"))

    def test_custom_option_name(self) -> None:
        field_decl = FieldDecl(name="note", scalar_type="string", options={"derived_by": "comment"})
        field_def = FieldDef.of(field_decl, option_name="derived_by")
        assert [str(ref) for ref in field_def.refs] == ["comment"]

    def test_matches_type_when_any_alternative_resolves(self) -> None:
        bar = _message("Bar", fields=[_field("comment")])
        assert FieldDef.of(_field("note", by="missing, comment")).matches_type(bar)
        assert not FieldDef.of(_field("note", by="missing")).matches_type(bar)


# ###############
# Enrichment Types
# ###############


class TestIsEnrichment:
    def test_requires_non_blank_option(self) -> None:
        assert is_enrichment(_message("Foo", enrichment_for="Bar"))
        assert not is_enrichment(_message("Foo", enrichment_for="  "))
        assert not is_enrichment(_message("Foo"))


class TestEnrichmentType:
    def test_missing_option(self) -> None:
        with pytest.raises(MissingOptionError, match="enrichment_for"):
            EnrichmentType(_message("Foo", fields=[_field("note")]))

    def test_no_fields(self) -> None:
        with pytest.raises(MissingOptionError, match="no fields"):
            EnrichmentType(_message("Foo", enrichment_for="Bar"))

    def test_malformed_source_reference(self) -> None:
        with pytest.raises(InvalidReferenceError):
            EnrichmentType(_message("Foo", fields=[_field("note")], enrichment_for="acme..Bar"))

    def test_unqualified_sources_move_to_enrichment_package(self) -> None:
        enrichment = EnrichmentType(_message("Foo", fields=[_field("note")], enrichment_for="Bar"))
        assert enrichment.source_refs == (DirectTypeRef(name="acme.Bar"),)

    def test_wildcard_sources_stay_as_written(self) -> None:
        enrichment = EnrichmentType(_message("Foo", fields=[_field("note")], enrichment_for="billing.*"))
        assert enrichment.source_refs == (PackageTypeRef(package="billing"),)

    def test_custom_option_names(self) -> None:
        message = MessageDecl(
            name="Foo",
            full_name="Foo",
            fields=[FieldDecl(name="note", scalar_type="string", options={"via": "pkg.Bar.comment"})],
            options={"derived_from": "pkg.Bar"},
        )
        enrichment = EnrichmentType(message, source_option="derived_from", by_option="via")
        assert [str(ref) for ref in enrichment.fields[0].refs] == ["pkg.Bar.comment"]

    def test_is_source(self) -> None:
        enrichment = EnrichmentType(_message("Foo", fields=[_field("note")], enrichment_for="Bar"))
        assert enrichment.is_source(_message("Bar"))
        assert not enrichment.is_source(_message("Bar", package="other"))


class TestSourceTypes:
    def _schema(self, *messages: MessageDecl) -> SchemaGraph:
        return SchemaGraph([ProtoFile(path="acme/types.proto", package="acme", messages=list(messages))])

    def test_sources_need_a_referenced_field(self) -> None:
        foo = _message("Foo", fields=[_field("note", by="comment")], enrichment_for="*")
        with_comment = _message("Bar", fields=[_field("comment")])
        without_comment = _message("Baz", fields=[_field("title")])
        enrichment = EnrichmentType(foo)
        sources = enrichment.source_types(self._schema(foo, with_comment, without_comment))
        assert [m.full_name for m in sources] == ["acme.Bar"]

    def test_enrichment_is_never_its_own_source(self) -> None:
        foo = _message("Foo", fields=[_field("comment")], enrichment_for="*")
        enrichment = EnrichmentType(foo)
        assert enrichment.source_types(self._schema(foo)) == []
