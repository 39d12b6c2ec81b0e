import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.warehouses.models import Warehouse


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _no_retry_backoff(settings):
    """Retried order attempts should not sleep in tests."""
    settings.ORDER_CREATE_RETRY_BACKOFF_MS = 0


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="orders-user", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


# ---------------------------------------------------------------------------
# Warehouses on the equator
#
# One degree of longitude at the equator is 111.19 km, which keeps the
# expected shipping costs easy to derive by hand.
# ---------------------------------------------------------------------------


@pytest.fixture()
def near_warehouse():
    return Warehouse.objects.create(name="Near", latitude=0.0, longitude=0.0, stock=5)


@pytest.fixture()
def far_warehouse():
    return Warehouse.objects.create(name="Far", latitude=0.0, longitude=1.0, stock=10)


@pytest.fixture()
def warehouses(near_warehouse, far_warehouse):
    return near_warehouse, far_warehouse
