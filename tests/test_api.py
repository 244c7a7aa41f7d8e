"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.
Geolocation is disabled for the suite, so no request leaves the
process.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware bugs
  - Response format regressions
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the Shopping Bias Detector API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:

    def test_health_returns_200(self, client):
        r = client.get("/health")
        assert r.status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["biases_tracked"] == 10
        assert data["shopping_scenarios"] == 16
        assert data["default_currency"] == "USD"
        assert data["geolocation_enabled"] is False

    def test_root_returns_200(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["docs"] == "/docs"

    def test_version_headers(self, client):
        r = client.get("/health")
        assert r.headers["X-Catalog-Version"]
        assert r.headers["X-Content-Type-Options"] == "nosniff"


# ============================================================
# ANALYZE
# ============================================================

class TestAnalyze:

    def test_clean_listing(self, client):
        r = client.post("/analyze", json={"item_name": "Milk", "price": "2.49"})
        assert r.status_code == 200
        data = r.json()
        assert data["bias_detected"] is False
        assert data["bias_count"] == 0
        assert data["biases"] == []
        assert data["formatted_price"] == "$2.49"
        assert data["summary"].startswith("No obvious biases detected")

    def test_scarcity_scenario(self, client):
        r = client.post("/analyze", json={
            "item_name": "Sneakers",
            "price": 79.0,
            "flags": {"limitedTime": True, "lowStock": True},
        })
        assert r.status_code == 200
        data = r.json()
        assert [b["id"] for b in data["biases"]] == ["scarcity", "loss_aversion"]
        assert data["selected_count"] == 2
        assert data["tactics_summary"] == "2 marketing tactics detected in listing"

    def test_all_flags(self, client):
        from shopbias.signals import SIGNAL_FLAGS
        r = client.post("/analyze", json={
            "item_name": "Everything",
            "price": "10",
            "flags": {f: True for f in SIGNAL_FLAGS},
        })
        data = r.json()
        assert data["bias_count"] == 10
        assert data["selected_count"] == 16

    def test_response_schema_fields(self, client):
        r = client.post("/analyze", json={
            "item_name": "Headphones",
            "price": "99.99",
            "original_price": "149.99",
            "flags": {"hasOriginalPrice": True},
            "currency": "gbp",
        })
        data = r.json()
        required_fields = [
            "item_name", "price", "original_price", "currency",
            "formatted_price", "formatted_original_price", "selected_count",
            "tactics_summary", "bias_detected", "bias_count", "summary",
            "biases", "catalog_version", "ignored_flags",
        ]
        for field in required_fields:
            assert field in data, f"Missing field: {field}"
        assert data["currency"] == "GBP"
        assert data["formatted_original_price"] == "£149.99"

    def test_bias_structure(self, client):
        r = client.post("/analyze", json={
            "item_name": "Plan", "price": "9", "flags": {"multipleTiers": True},
        })
        bias = r.json()["biases"][0]
        for key in ("id", "name", "description", "explanation", "advice"):
            assert key in bias

    def test_unknown_flags_ignored(self, client):
        r = client.post("/analyze", json={
            "item_name": "Gadget", "price": "5", "flags": {"notARealFlag": True},
        })
        assert r.status_code == 200
        data = r.json()
        assert data["bias_count"] == 0
        assert data["ignored_flags"] == ["notARealFlag"]

    def test_missing_name_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "  ", "price": "10"})
        assert r.status_code == 422
        assert r.json()["detail"] == "Enter item name and price to continue"

    def test_unparseable_price_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "Thing", "price": "ten"})
        assert r.status_code == 422

    def test_missing_price_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "Thing"})
        assert r.status_code == 422

    def test_unknown_currency_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "Thing", "price": "1", "currency": "XYZ"})
        assert r.status_code == 422

    def test_malformed_currency_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "Thing", "price": "1", "currency": "US"})
        assert r.status_code == 422

    def test_oversized_body_rejected(self, client):
        r = client.post("/analyze", json={"item_name": "x", "price": "1", "pad": "a" * 70_000})
        assert r.status_code == 413
        assert r.headers["X-Catalog-Version"]
        assert r.headers["X-Frame-Options"] == "DENY"

    def test_zero_price_formatted(self, client):
        r = client.post("/analyze", json={"item_name": "Sample", "price": "0"})
        assert r.status_code == 200
        assert r.json()["formatted_price"] == "$0.00"

    def test_unhandled_error_is_generic_and_stamped(self, monkeypatch):
        import api.main

        def explode(*args, **kwargs):
            raise RuntimeError("secret internals")

        monkeypatch.setattr(api.main, "analyze_listing", explode)
        c = TestClient(api.main.app, raise_server_exceptions=False)
        r = c.post("/analyze", json={"item_name": "Thing", "price": "1"})
        assert r.status_code == 500
        assert "secret internals" not in r.text
        assert r.json()["detail"].startswith("Internal server error")
        assert r.headers["X-Catalog-Version"]
        assert r.headers["X-Content-Type-Options"] == "nosniff"


# ============================================================
# CATALOG
# ============================================================

class TestCatalog:

    def test_biases_listed_in_order(self, client):
        r = client.get("/biases")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 10
        assert data["biases"][0]["id"] == "anchoring"
        assert data["biases"][-1]["id"] == "reciprocity"
        assert data["biases"][3]["signals"] == ["bundleDeal"]

    def test_single_bias(self, client):
        r = client.get("/biases/decoy")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "Decoy Effect"
        assert data["signals"] == ["multipleTiers"]

    def test_unknown_bias_404(self, client):
        r = client.get("/biases/not_a_bias")
        assert r.status_code == 404
        assert r.headers["X-Catalog-Version"]

    def test_options_listed(self, client):
        r = client.get("/options")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 16
        first = data["options"][0]
        assert first["id"] == "hasOriginalPrice"
        assert first["label"]
        assert first["icon"]


# ============================================================
# CURRENCY
# ============================================================

class TestCurrency:

    def test_currency_list(self, client):
        r = client.get("/currencies")
        assert r.status_code == 200
        data = r.json()
        assert len(data["currencies"]) == 18
        assert data["default"]["code"] == "USD"

    def test_detect_falls_back(self, client):
        r = client.get("/currencies/detect")
        assert r.status_code == 200
        data = r.json()
        assert data["detected"] is False
        assert data["currency"]["code"] == "USD"
