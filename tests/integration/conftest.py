"""Fixtures for HTTP integration tests.

The FastAPI app initializes both the Storefront and Notifications domains
and wires order status changes into the notification feed.
"""

import os

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def app(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from app import app as fastapi_app

    return fastapi_app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

    from notifications.domain import notifications
    from storefront.domain import storefront

    for domain in (storefront, notifications):
        with domain.domain_context():
            from protean import current_domain

            for _, provider in current_domain.providers.items():
                provider._data_reset()
            current_domain.event_store.store._data_reset()


@pytest.fixture
def admin_id(client):
    response = client.post(
        "/shoppers",
        json={"name": "Admin", "email": "admin@grocerly.dz", "role": "Admin"},
    )
    assert response.status_code == 201
    return response.json()["shopper_id"]


@pytest.fixture
def shopper_id(client):
    response = client.post("/shoppers", json={"name": "Amina", "email": "amina@example.com"})
    assert response.status_code == 201
    return response.json()["shopper_id"]
