def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_live(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_metrics_requires_admin(client, viewer_headers):
    assert client.get("/metrics").status_code == 401
    assert client.get("/metrics", headers=viewer_headers).status_code == 403


def test_metrics_exposes_pnl_counters(client, admin_headers):
    client.get("/pnl/report", headers=admin_headers)
    resp = client.get("/metrics", headers=admin_headers)
    assert resp.status_code == 200
    text = resp.text
    assert "pnl_reports_generated_total" in text
    assert "pnl_report_latency_seconds" in text
    assert "pnl_costs_excluded_total" in text
    assert "business_costs_changed_total" in text


def test_security_headers(client):
    resp = client.get("/live")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
