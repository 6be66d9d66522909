"""
Unit tests for FastAPI application setup and configuration.

Verifies the application wiring without a database:
- build_app() creates a configured FastAPI instance
- Application metadata and documentation URLs
- Router registration (health, listings under /v1)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from listings_query.entrypoints.http.app import build_app


def test_build_app_creates_new_instance_each_call() -> None:
    app1 = build_app()
    app2 = build_app()

    assert isinstance(app1, FastAPI)
    assert app1 is not app2


def test_app_metadata() -> None:
    app = build_app()

    assert app.title == "Listings Query API"
    assert app.version == "0.1.0"
    assert "practice listings" in app.description


def test_app_documentation_urls() -> None:
    app = build_app()

    assert app.docs_url == "/docs"
    assert app.redoc_url == "/redoc"
    assert app.openapi_url == "/openapi.json"


# ==============================================================================
# Router Registration
# ==============================================================================


def test_health_endpoint_responds() -> None:
    client = TestClient(build_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_listings_router_has_v1_prefix() -> None:
    # OpenAPI schema does not trigger dependencies
    paths = build_app().openapi()["paths"]

    assert "/v1/listings" in paths
    assert "/listings" not in paths


def test_openapi_documents_listings_endpoint() -> None:
    operation = build_app().openapi()["paths"]["/v1/listings"]["get"]

    assert operation["summary"] == "Search listings"
    assert "Listings" in operation["tags"]
    assert "422" in operation["responses"]
    param_names = [param["name"] for param in operation.get("parameters", [])]
    assert "x-user-id" in param_names


def test_app_returns_404_for_unknown_routes() -> None:
    client = TestClient(build_app())

    assert client.get("/unknown").status_code == 404
    assert client.get("/v1/unknown").status_code == 404


def test_module_level_app() -> None:
    from listings_query.entrypoints.http.app import app

    assert isinstance(app, FastAPI)
    assert app.title == "Listings Query API"
