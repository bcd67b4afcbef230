"""Unit tests for the normalizer."""

import pytest

from log_history.exceptions import InputShapeError
from log_history.models.log_entry import EntityType
from log_history.models.raw import RawEntity
from log_history.normalizer import flatten_logs, resolve_entity_name


def _event(field: str = "stock", **kwargs) -> dict:
    ev = {
        "field": field,
        "changeType": "update",
        "oldValue": 1,
        "newValue": 2,
        "changedBy": "admin",
        "changedAt": "2024-01-01T00:00:00Z",
    }
    ev.update(kwargs)
    return ev


class TestFlattenLogs:
    """Tests for flatten_logs."""

    def test_one_entry_per_event(self, products_payload) -> None:
        """Output length equals total change events; entities without history add nothing."""
        logs = flatten_logs(products_payload, EntityType.PRODUCT, "itemCode", "itemName")
        expected = sum(len(p.get("changeHistory") or []) for p in products_payload)
        assert len(logs) == expected == 3

    def test_tags_entity_fields(self, products_payload) -> None:
        logs = flatten_logs(products_payload, "product", "itemCode", "itemName")
        assert logs[0].entity_type == EntityType.PRODUCT
        assert logs[0].entity_id == "P1"
        assert logs[0].entity_name == "Widget"
        assert logs[2].entity_id == "P2"

    def test_preserves_per_entity_order(self) -> None:
        entities = [
            {"id": "A", "changeHistory": [_event("first"), _event("second")]},
            {"id": "B", "changeHistory": [_event("third")]},
        ]
        logs = flatten_logs(entities, "job", "id", "name")
        assert [e.field for e in logs] == ["first", "second", "third"]

    def test_name_falls_back_to_id(self) -> None:
        """Missing or empty name uses the id."""
        entities = [
            {"repairInvoice": "INV-9", "customerName": "", "changeHistory": [_event()]},
            {"repairInvoice": "INV-8", "changeHistory": [_event()]},
        ]
        logs = flatten_logs(entities, EntityType.JOB, "repairInvoice", "customerName")
        assert [e.entity_name for e in logs] == ["INV-9", "INV-8"]

    def test_name_empty_when_no_id_or_name(self) -> None:
        logs = flatten_logs([{"changeHistory": [_event()]}], "supplier", "supplierName", "businessName")
        assert logs[0].entity_name == ""
        assert logs[0].entity_id == ""

    def test_numeric_id_coerced(self) -> None:
        logs = flatten_logs([{"code": 17, "changeHistory": [_event()]}], "product", "code", "name")
        assert logs[0].entity_id == "17"
        assert logs[0].entity_name == "17"

    def test_accepts_raw_entities(self) -> None:
        raw = RawEntity(data={"itemCode": "P1", "itemName": "Widget", "changeHistory": [_event()]})
        logs = flatten_logs([raw], "product", "itemCode", "itemName")
        assert len(logs) == 1

    def test_does_not_mutate_input(self, products_payload) -> None:
        import copy

        before = copy.deepcopy(products_payload)
        flatten_logs(products_payload, "product", "itemCode", "itemName")
        assert products_payload == before

    def test_empty_list(self) -> None:
        assert flatten_logs([], "product", "itemCode", "itemName") == []

    def test_none_raises_input_shape_error(self) -> None:
        """A missing entity list cannot be normalized."""
        with pytest.raises(InputShapeError):
            flatten_logs(None, "product", "itemCode", "itemName")

    def test_dict_raises_input_shape_error(self) -> None:
        with pytest.raises(InputShapeError):
            flatten_logs({"products": []}, "product", "itemCode", "itemName")

    def test_carries_event_extras(self) -> None:
        entities = [{"supplierName": "S1", "changeHistory": [_event("cart-add", itemName="Widget")]}]
        logs = flatten_logs(entities, "supplier", "supplierName", "businessName")
        assert logs[0].extras["itemName"] == "Widget"


class TestResolveEntityName:
    """Tests for resolve_entity_name."""

    def test_prefers_name(self) -> None:
        raw = RawEntity(data={"itemCode": "P1", "itemName": "Widget"})
        assert resolve_entity_name(raw, "itemCode", "itemName") == "Widget"

    def test_falls_back_to_id(self) -> None:
        raw = RawEntity(data={"itemCode": "P1", "itemName": None})
        assert resolve_entity_name(raw, "itemCode", "itemName") == "P1"
