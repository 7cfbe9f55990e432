"""Unit tests for the signed URL verification server."""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from url_signer.server import SignedUrlGuard, create_app, get_signer
from url_signer.utils.url import add_query_parameters


@pytest.fixture
def client(signer):
    """Test client for an app validating with the shared signer."""
    with TestClient(create_app(signer)) as client:
        yield client


class TestHealth:
    """Tests for the health endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestVerify:
    """Tests for the /verify endpoint."""

    def test_signed_request_url(self, client, signer):
        url = signer.sign("http://testserver/verify", 60)

        response = client.get(url)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_unsigned_request(self, client):
        response = client.get("/verify")

        assert response.status_code == 403
        assert response.json() == {"detail": "Invalid or expired link"}

    def test_original_url_header(self, client, signer):
        url = signer.sign("https://cdn.example.com/file?id=42", 60)

        response = client.get("/verify", headers={"X-Original-URL": url})

        assert response.status_code == 200

    def test_tampered_original_url(self, client, signer):
        url = signer.sign("https://cdn.example.com/file?id=42", 60)
        tampered = add_query_parameters(url, {"id": "43"})

        response = client.get("/verify", headers={"X-Original-URL": tampered})

        assert response.status_code == 403
        assert response.json() == {"detail": "Invalid or expired link"}

    def test_expired_link(self, client, signer, clock):
        url = signer.sign("https://cdn.example.com/file", 60)
        clock.advance(61)

        response = client.get("/verify", headers={"X-Original-URL": url})

        assert response.status_code == 403

    def test_signed_with_other_key(self, client, signer):
        url = signer.sign("https://cdn.example.com/file", 60, key="other")

        response = client.get("/verify", headers={"X-Original-URL": url})

        assert response.status_code == 403


class TestSignedUrlGuard:
    """Tests for SignedUrlGuard used in another application."""

    @pytest.fixture
    def app(self, signer):
        app = FastAPI()
        app.dependency_overrides[get_signer] = lambda: signer

        @app.get("/download/{name}")
        async def download(name: str, url: str = Depends(SignedUrlGuard())):
            return {"name": name, "url": url}

        return app

    def test_allows_signed_url(self, app, signer):
        url = signer.sign("http://testserver/download/report.pdf", 60)

        response = TestClient(app).get(url)

        assert response.status_code == 200
        assert response.json() == {"name": "report.pdf", "url": url}

    def test_rejects_other_path(self, app, signer):
        url = signer.sign("http://testserver/download/report.pdf", 60)

        response = TestClient(app).get(url.replace("report.pdf", "secret.pdf"))

        assert response.status_code == 403

    def test_ignores_header_when_not_configured(self, app, signer):
        url = signer.sign("https://cdn.example.com/file", 60)

        response = TestClient(app).get("/download/file", headers={"X-Original-URL": url})

        assert response.status_code == 403


class TestGetSigner:
    """Tests for get_signer."""

    def test_raises_when_not_initialized(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            get_signer()
