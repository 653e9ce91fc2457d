# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for resolving whole schemas."""

import logging

import pytest

from protomark.compiler import EnrichmentRecord, FieldBinding, resolve_message, resolve_schema
from protomark.config import PatternRule, ProtomarkConfig
from protomark.enrichment import MissingOptionError, UnresolvableReferenceError
from protomark.model import SchemaGraph
from protomark.schema import parse_schema_document

# ###############
# Test Helpers
# ###############

SCHEMA_TEXT = """
files:
  - path: acme/OrderEvents.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true}
    messages:
      - name: OrderPlaced
        fields:
          - {name: id, type: OrderId}
          - {name: customer, type: string}
          - {name: total, type: int64}
      - name: OrderCancelled
        fields:
          - {name: id, type: OrderId}
  - path: acme/identifiers.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true}
    messages:
      - name: OrderId
        fields:
          - {name: uuid, type: string}
  - path: acme/enrichments.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true}
    messages:
      - name: CustomerInfo
        options: {enrichment_for: "OrderPlaced,OrderCancelled"}
        fields:
          - {name: id, type: OrderId}
          - {name: customer, type: string}
          - name: total
            type: int64
            options: {by: "OrderPlaced.total, context.total"}
"""


def _schema(text: str = SCHEMA_TEXT) -> SchemaGraph:
    return parse_schema_document(text)


def _config() -> ProtomarkConfig:
    return ProtomarkConfig(patterns=(PatternRule(suffix="Event", interface="com.acme.DomainEvent"),))


# ###############
# Single Messages
# ###############


class TestResolveMessage:
    def test_event_gets_two_directives(self) -> None:
        schema = _schema()
        placed = schema.find_message("acme.OrderPlaced")
        assert placed is not None
        resolution = resolve_message(placed, schema, _config())
        assert [d.content for d in resolution.directives] == [
            "io.spine.base.EventMessage,",
            "com.acme.DomainEvent,",
        ]
        assert resolution.matches == ()

    def test_resolving_twice_is_identical(self) -> None:
        schema = _schema()
        placed = schema.find_message("acme.OrderPlaced")
        assert placed is not None
        assert resolve_message(placed, schema, _config()) == resolve_message(placed, schema, _config())


# ###############
# Schemas
# ###############


class TestResolveSchema:
    def test_directives_in_schema_order(self) -> None:
        result = resolve_schema(_schema(), _config())
        assert [(d.marker, d.content) for d in result.directives] == [
            ("message_implements:acme.OrderPlaced", "io.spine.base.EventMessage,"),
            ("message_implements:acme.OrderPlaced", "com.acme.DomainEvent,"),
            ("message_implements:acme.OrderCancelled", "io.spine.base.EventMessage,"),
            ("message_implements:acme.OrderCancelled", "com.acme.DomainEvent,"),
            ("message_implements:acme.OrderId", "io.spine.base.UuidValue<com.acme.OrderId>,"),
        ]

    def test_enrichment_records_and_rejections(self) -> None:
        result = resolve_schema(_schema(), _config())

        assert result.enrichments == [
            EnrichmentRecord(
                enrichment="acme.CustomerInfo",
                source="acme.OrderPlaced",
                fields={
                    "id": FieldBinding(field="id", ref="id"),
                    "customer": FieldBinding(field="customer", ref="customer"),
                    "total": FieldBinding(field="total", ref="OrderPlaced.total"),
                },
            )
        ]
        assert result.has_errors
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.declaration == "acme.CustomerInfo"
        assert error.source == "acme.OrderCancelled"
        assert error.category == "UnresolvableReferenceError"

    def test_context_fallback_is_recorded(self) -> None:
        cancelled_fields = "      - name: OrderCancelled\n        fields:\n          - {name: id, type: OrderId}\n"
        text = SCHEMA_TEXT.replace(
            cancelled_fields,
            cancelled_fields + "          - {name: customer, type: string}\n",
        )
        result = resolve_schema(_schema(text), _config())
        cancelled = [r for r in result.enrichments if r.source == "acme.OrderCancelled"]
        assert cancelled == [
            EnrichmentRecord(
                enrichment="acme.CustomerInfo",
                source="acme.OrderCancelled",
                fields={
                    "id": FieldBinding(field="id", ref="id"),
                    "customer": FieldBinding(field="customer", ref="customer"),
                    "total": FieldBinding(field=None, ref="context.total"),
                },
            )
        ]
        assert not result.has_errors

    @pytest.mark.parametrize("max_workers", [1, 2, None])
    def test_output_does_not_depend_on_workers(self, max_workers: int | None) -> None:
        sequential = resolve_schema(_schema(), _config(), max_workers=1)
        assert resolve_schema(_schema(), _config(), max_workers=max_workers) == sequential

    def test_fail_fast_raises_first_error(self) -> None:
        with pytest.raises(UnresolvableReferenceError, match="OrderCancelled"):
            resolve_schema(_schema(), _config(), fail_fast=True)

    def test_fail_fast_sequential(self) -> None:
        with pytest.raises(UnresolvableReferenceError):
            resolve_schema(_schema(), _config(), max_workers=1, fail_fast=True)

    def test_malformed_enrichment_is_reported_once(self) -> None:
        text = """
files:
  - path: acme/enrichments.proto
    package: acme
    messages:
      - name: Empty
        options: {enrichment_for: "acme.*"}
"""
        result = resolve_schema(_schema(text))
        assert len(result.errors) == 1
        assert result.errors[0].declaration == "acme.Empty"
        assert result.errors[0].source is None
        assert result.errors[0].category == MissingOptionError.__name__

    def test_duplicate_names_resolve_against_their_own_files(self) -> None:
        text = """
files:
  - path: acme/events.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true}
    messages:
      - name: Order
  - path: acme/orders.proto
    package: acme
    options: {java_package: com.acme.orders, java_multiple_files: true}
    messages:
      - name: Order
"""
        result = resolve_schema(_schema(text), max_workers=1)
        assert [(d.target, d.content) for d in result.directives] == [
            ("com/acme/Order.java", "io.spine.base.EventMessage,"),
        ]

    def test_custom_interface_is_declared_once_per_run(self) -> None:
        text = """
files:
  - path: acme/orders.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true, every_is: OrderMarker}
    messages:
      - name: Order
      - name: OrderLine
  - path: acme/customers.proto
    package: acme
    options: {java_package: com.acme, java_multiple_files: true}
    messages:
      - name: Customer
        options: {is: com.acme.OrderMarker}
"""
        result = resolve_schema(_schema(text))
        assert [d.content for d in result.directives] == ["com.acme.OrderMarker,"] * 3
        assert [(d.target, d.marker) for d in result.declarations] == [("com/acme/OrderMarker.java", "")]
        assert "public interface OrderMarker extends com.google.protobuf.Message" in result.declarations[0].content

    def test_empty_schema(self) -> None:
        result = resolve_schema(SchemaGraph([]))
        assert result.directives == []
        assert result.declarations == []
        assert result.enrichments == []
        assert not result.has_errors

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="protomark.compiler.engine"):
            resolve_schema(_schema(), _config())
        assert "Resolved 4 messages" in caplog.text
