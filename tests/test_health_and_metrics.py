def test_liveness(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_healthz_checks_database(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_ready_reports_dependencies(client):
    resp = client.get("/ready")
    assert resp.status_code == 200
    body = resp.json()
    assert body["db"] is True
    assert body["cache"] is True


def test_ready_fails_when_cache_unreachable(client, cache_store, monkeypatch):
    monkeypatch.setattr(cache_store, "ping", lambda: False)
    resp = client.get("/ready")
    assert resp.status_code == 503
    assert resp.json()["detail"]["cache"] is False


def test_metrics_exposes_inventory_counters(client):
    product = client.post("/api/products", json={"name": "Widget", "price": 2, "sku": "W-1", "inventory_quantity": 1})
    client.post(f"/api/products/{product.json()['id']}/inventory/decrease", json={"quantity": 5})
    client.get(f"/api/products/{product.json()['id']}")
    client.get(f"/api/products/{product.json()['id']}")

    resp = client.get("/metrics")
    assert resp.status_code == 200
    text = resp.text
    assert "inventory_insufficient_total" in text
    assert "inventory_cache_hits_total" in text
    assert "inventory_cache_misses_total" in text
    assert "inventory_cache_evictions_total" in text
