# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for field references and field paths."""

import pytest

from protomark.model import FieldDecl, FieldKind, MessageDecl, ProtoFile, SchemaGraph
from protomark.refs import ANY, CONTEXT, FieldPath, FieldRef, InvalidReferenceError

# ###############
# Test Helpers
# ###############


def _scalar(name: str, scalar_type: str = "string") -> FieldDecl:
    return FieldDecl(name=name, kind=FieldKind.SCALAR, scalar_type=scalar_type)


def _ref(name: str, type_name: str) -> FieldDecl:
    return FieldDecl(name=name, kind=FieldKind.MESSAGE, type_name=type_name)


TIMESTAMP = MessageDecl(
    name="Timestamp",
    full_name="google.protobuf.Timestamp",
    package="google.protobuf",
    fields=[_scalar("seconds", "int64"), _scalar("nanos", "int32")],
)
AUTHOR = MessageDecl(name="Author", full_name="acme.Author", package="acme", fields=[_scalar("name")])
DETAILS = MessageDecl(
    name="Details",
    full_name="acme.Details",
    package="acme",
    fields=[_ref("author", "acme.Author"), _scalar("summary")],
)
ARTICLE = MessageDecl(
    name="Article",
    full_name="acme.Article",
    package="acme",
    fields=[_scalar("title"), _ref("details", "acme.Details"), _ref("published", "google.protobuf.Timestamp")],
)
SCHEMA = SchemaGraph(
    [
        ProtoFile(path="google/protobuf/timestamp.proto", package="google.protobuf", messages=[TIMESTAMP]),
        ProtoFile(path="acme/article.proto", package="acme", messages=[AUTHOR, DETAILS, ARTICLE]),
    ]
)


# ###############
# Parsing
# ###############


class TestParse:
    def test_plain_field_is_inner(self) -> None:
        ref = FieldRef.parse("plain_field")
        assert ref.is_inner()
        assert not ref.is_context()
        assert ref.qualifier == ANY
        assert ref.field_name() == "plain_field"

    def test_context_reference(self) -> None:
        ref = FieldRef.parse("context.timestamp")
        assert ref.is_context()
        assert not ref.is_inner()
        assert ref.qualifier == CONTEXT
        assert ref.path == FieldPath(segments=("timestamp",))

    def test_keeps_original_text(self) -> None:
        ref = FieldRef.parse("  details.author.name ")
        assert ref.value == "details.author.name"
        assert str(ref) == "details.author.name"
        assert ref.field_name() == "name"

    @pytest.mark.parametrize("raw", ["", "   ", "a..b", ".a", "a.", "details.*", "*", "context"])
    def test_rejects_malformed_references(self, raw: str) -> None:
        with pytest.raises(InvalidReferenceError):
            FieldRef.parse(raw)

    def test_parse_all_preserves_order(self) -> None:
        refs = FieldRef.parse_all("Order.id, context.id ,id")
        assert [str(ref) for ref in refs] == ["Order.id", "context.id", "id"]

    def test_parse_all_rejects_empty_alternative(self) -> None:
        with pytest.raises(InvalidReferenceError):
            FieldRef.parse_all("id,,name")


# ###############
# Resolution
# ###############


class TestFind:
    def test_type_qualified_path_finds_field(self) -> None:
        found = FieldRef.parse("Timestamp.seconds").find(TIMESTAMP)
        assert found is not None
        assert found.name == "seconds"

    def test_other_type_name_finds_nothing(self) -> None:
        assert FieldRef.parse("LocalTime.seconds").find(TIMESTAMP) is None

    def test_fully_qualified_type_prefix(self) -> None:
        found = FieldRef.parse("google.protobuf.Timestamp.nanos").find(TIMESTAMP)
        assert found is not None
        assert found.name == "nanos"

    def test_plain_field(self) -> None:
        found = FieldRef.parse("title").find(ARTICLE)
        assert found is not None
        assert found.name == "title"

    def test_nested_path_follows_message_fields(self) -> None:
        found = FieldRef.parse("details.author.name").find(ARTICLE, SCHEMA)
        assert found is not None
        assert found.name == "name"

    def test_nested_path_stops_at_first_unknown_segment(self) -> None:
        assert FieldRef.parse("details.editor.name").find(ARTICLE, SCHEMA) is None

    def test_nested_path_needs_schema(self) -> None:
        assert FieldRef.parse("details.summary").find(ARTICLE) is None

    def test_scalar_segment_cannot_be_followed(self) -> None:
        assert FieldRef.parse("title.length").find(ARTICLE, SCHEMA) is None

    def test_context_reference_resolves_against_given_declaration(self) -> None:
        envelope = MessageDecl(
            name="EventContext",
            full_name="acme.EventContext",
            package="acme",
            fields=[_ref("timestamp", "google.protobuf.Timestamp")],
        )
        ref = FieldRef.parse("context.timestamp")
        assert ref.find(envelope) is not None
        assert ref.find(ARTICLE) is None

    def test_context_reference_never_strips_type_prefix(self) -> None:
        assert FieldRef.parse("context.Timestamp.seconds").find(TIMESTAMP) is None


class TestMatchesType:
    def test_inner_reference_matches_when_field_exists(self) -> None:
        assert FieldRef.parse("seconds").matches_type(TIMESTAMP)
        assert not FieldRef.parse("minutes").matches_type(TIMESTAMP)

    def test_context_reference_requires_context_type(self) -> None:
        envelope = MessageDecl(
            name="EventContext",
            full_name="acme.EventContext",
            package="acme",
            fields=[_scalar("id")],
        )
        not_envelope = MessageDecl(name="Event", full_name="acme.Event", package="acme", fields=[_scalar("id")])
        ref = FieldRef.parse("context.id")
        assert ref.matches_type(envelope)
        assert not ref.matches_type(not_envelope)
