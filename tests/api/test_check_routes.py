import pytest

pytest.importorskip("fastapi")

from fastapi.testclient import TestClient

from veritas_check.api.app import app, get_pipeline
from veritas_check.arbiter.gateway import ArbiterGateway
from veritas_check.orchestrator.pipeline import RiskPipeline
from veritas_check.tools.redirects import RedirectResolver


@pytest.fixture
def client_for(scorer, reference, fake_probe):
    def _make(service=None, *, strict=False, routes=None):
        pipeline = RiskPipeline(
            scorer=scorer,
            gateway=ArbiterGateway(service, strict_verdicts=strict),
            resolver=RedirectResolver(probe=fake_probe(routes), reference=reference),
        )
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_health(client_for):
    response = client_for().get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_check_email_returns_result(client_for):
    response = client_for().post("/api/check-email", json={"email": "support-id-7193@service.amason.com"})
    assert response.status_code == 200
    body = response.json()
    assert body["verdict"] == "fake"
    assert body["normalized_score"] == 85
    assert body["is_risky"] is True
    assert body["verdict_source"] == "fallback"
    assert any(item["rule"] == "lookalike_domain" for item in body["indicators"])


def test_structurally_invalid_email_is_a_result_not_an_error(client_for):
    response = client_for().post("/api/check-email", json={"email": "no-at-sign"})
    assert response.status_code == 200
    assert response.json()["transition"] == "fallback_invalid_input"


def test_check_url_follows_redirects(client_for, fake_arbiter):
    client = client_for(fake_arbiter("safe", "Plain landing page."), routes={"https://bit.ly/x": "https://example.com"})
    response = client.post("/api/check-url", json={"url": "https://bit.ly/x"})
    assert response.status_code == 200
    body = response.json()
    assert body["redirect_chain"] == ["https://bit.ly/x", "https://example.com"]
    assert body["final_destination"] == "https://example.com"
    assert body["is_shortened"] is True
    assert body["verdict"] == "safe"
    assert body["explanation"] == "Plain landing page."


@pytest.mark.parametrize(
    ("path", "payload"),
    [
        ("/api/check-email", {}),
        ("/api/check-email", {"email": ""}),
        ("/api/check-url", {"link": "https://example.com"}),
        ("/api/check-url", {"url": "http://[::1"}),
        ("/api/check-url", {"url": "not a url at all"}),
    ],
)
def test_bad_request_shape_is_rejected(client_for, path, payload):
    response = client_for().post(path, json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request"
    assert body["details"]


def test_contract_violation_in_strict_mode_is_server_error(client_for, fake_arbiter):
    client = client_for(fake_arbiter("maybe"), strict=True)
    response = client.post("/api/check-url", json={"url": "https://example.com"})
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to check URL"
    assert "maybe" in body["message"]


def test_malformed_url_never_reaches_pipeline(client_for, fake_arbiter):
    service = fake_arbiter("safe")
    response = client_for(service).post("/api/check-url", json={"url": "not a url at all"})
    assert response.status_code == 400
    assert response.json()["details"][0]["loc"] == ["body", "url"]
    assert service.calls == []
