"""Pytest fixtures for log-history tests."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest


@pytest.fixture
def products_payload() -> list[dict[str, Any]]:
    """Products API response (bare list)."""
    return [
        {
            "itemCode": "P1",
            "itemName": "Widget",
            "createdAt": "2023-12-01T08:00:00Z",
            "changeHistory": [
                {
                    "field": "stock",
                    "changeType": "update",
                    "oldValue": 10,
                    "newValue": 4,
                    "changedBy": "repairTech1",
                    "changedAt": "2024-01-01T10:00:00Z",
                },
                {
                    "field": "stock",
                    "changeType": "update",
                    "oldValue": 4,
                    "newValue": 20,
                    "changedBy": "excelImport",
                    "changedAt": "2024-01-03T09:00:00Z",
                },
            ],
        },
        {
            "itemCode": "P2",
            "itemName": "Gasket",
            "createdAt": "2023-11-15T12:00:00Z",
            "changeHistory": [
                {
                    "field": "stock",
                    "changeType": "addExpense",
                    "oldValue": None,
                    "newValue": {"itemName": "Gasket", "quantity": 5},
                    "changedBy": "admin",
                    "changedAt": "2024-01-02T12:00:00Z",
                }
            ],
        },
        {"itemCode": "P3", "itemName": "Bolt"},
    ]


@pytest.fixture
def suppliers_payload() -> dict[str, Any]:
    """Suppliers API response (wrapped)."""
    return {
        "suppliers": [
            {
                "supplierName": "S1",
                "businessName": "Acme Parts",
                "changeHistory": [
                    {
                        "field": "cart-add",
                        "changeType": "cart",
                        "oldValue": None,
                        "newValue": {"itemName": "Widget", "quantity": 3},
                        "changedBy": "buyer1",
                        "changedAt": "2024-01-02T12:00:00Z",
                    }
                ],
            }
        ]
    }


@pytest.fixture
def jobs_payload() -> list[dict[str, Any]]:
    """Repair jobs API response (bare list)."""
    return [
        {
            "repairInvoice": "INV-1",
            "customerName": "Jane Doe",
            "changeHistory": [
                {
                    "field": "status",
                    "changeType": "update",
                    "oldValue": "open",
                    "newValue": "closed",
                    "changedBy": "tech2",
                    "changedAt": "2024-01-04T15:30:00Z",
                }
            ],
        },
        {"repairInvoice": "INV-2", "customerName": "", "changeHistory": None},
    ]


@pytest.fixture
def excel_uploads_payload() -> list[dict[str, Any]]:
    """Excel uploads API response."""
    return [
        {
            "filename": "stock.xlsx",
            "uploadedBy": "admin",
            "products": [
                {"itemCode": "P1", "itemName": "Widget", "action": "created"},
                {"itemCode": "P9", "itemName": "Missing", "action": "updated"},
            ],
        }
    ]


@pytest.fixture
def api_routes(products_payload, suppliers_payload, jobs_payload, excel_uploads_payload) -> dict[str, Any]:
    """Path -> JSON body for the mock API."""
    return {
        "/api/products": products_payload,
        "/api/products/excel-uploads": excel_uploads_payload,
        "/api/suppliers": suppliers_payload,
        "/api/productsRepair": jobs_payload,
    }


@pytest.fixture
def make_client():
    """Factory: httpx client backed by a MockTransport serving routes; paths in failing return 500."""

    def _make(routes: dict[str, Any], failing: tuple[str, ...] = ()) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path in failing:
                return httpx.Response(500, json={"error": "boom"})
            if path not in routes:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=routes[path])

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def input_dir(tmp_path: Path, api_routes: dict[str, Any]) -> Path:
    """Directory with JSON exports of each endpoint, as read by --input-dir."""
    (tmp_path / "products.json").write_text(json.dumps(api_routes["/api/products"]))
    (tmp_path / "suppliers.json").write_text(json.dumps(api_routes["/api/suppliers"]))
    (tmp_path / "jobs.json").write_text(json.dumps(api_routes["/api/productsRepair"]))
    (tmp_path / "excel-uploads.json").write_text(json.dumps(api_routes["/api/products/excel-uploads"]))
    return tmp_path
