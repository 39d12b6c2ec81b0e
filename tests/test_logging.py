import logging
import uuid

import pytest


def _messages(caplog):
    return [record.getMessage() for record in caplog.records]


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id, version=4)
        assert str(parsed) == request_id

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        found = any(custom_id in message for message in _messages(caplog))
        assert found, (
            f"correlation_id '{custom_id}' not found in log records: "
            f"{_messages(caplog)}"
        )

    def test_order_events_carry_correlation_id(
        self, api_client_with_correlation, warehouses, caplog
    ):
        from django.contrib.auth import get_user_model

        client, cid = api_client_with_correlation
        user = get_user_model().objects.create_user(username="cid", password="x")
        client.force_authenticate(user=user)

        with caplog.at_level(logging.INFO):
            client.post(
                "/api/v1/orders/",
                {"quantity": 3, "latitude": 0.0, "longitude": 0.0},
                format="json",
            )

        created = [m for m in _messages(caplog) if "order.created" in m]
        assert created, _messages(caplog)
        assert cid in created[0]


class TestSensitiveDataMasking:
    def test_password_masked_in_log_output(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked_in_log_output(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_secret_masked_and_key_kept(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "secret: hunter2"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["data"] == "secret: ***MASKED***"

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.created", "order_number": "ORD-20260101-ABC123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD-20260101-ABC123"
        assert result["event"] == "order.created"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.verified", "quantity": 10, "is_valid": True}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["quantity"] == 10
        assert result["is_valid"] is True


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_health_check_reports_services(self, client):
        data = client.get("/health").json()
        assert data["services"]["database"]["status"] == "up"
        assert data["services"]["cache"]["status"] == "up"
        assert "response_time_ms" in data["services"]["database"]

    def test_health_check_reports_failing_dependency(self, client, monkeypatch):
        from modules.core import views

        def broken_cache():
            raise ConnectionError("cache unreachable")

        monkeypatch.setitem(views._CHECKS, "cache", broken_cache)
        response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["services"]["cache"] == {"status": "down"}

    @pytest.mark.parametrize("path", ["/api/v1/orders/", "/api/v1/warehouses/"])
    def test_api_requires_authentication(self, client, path):
        assert client.get(path).status_code == 401
