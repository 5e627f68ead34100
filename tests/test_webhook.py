"""
Tests for the automation webhook: best match, entity update and resume callback.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from app.core import settings
from app.database.dependencies import get_tariff_store
from app.main import app
from app.services import UNKNOWN_INSTALLATION
from app.services.webhook_service import build_entity_update

CALLBACK_URL = "https://workflow.example.com/resume"
HEADERS = {"x-epilot-token": "secret-token"}


def payload(**entity):
    entity = {"_id": "e-1", "_schema": "installation", **entity}
    return {"data": {"entity": entity, "resume_token": "resume-42", "callback_post_url": CALLBACK_URL}}


def ok_response():
    response = MagicMock(ok=True, status_code=200)
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def store(fake_store_factory, make_record):
    rates = dict(feed_in_tariff=8.2, reference_value=8.6, fallback_payment=6.9, tenant_power_surcharge=2.6)
    return fake_store_factory([
        make_record("SgK-LARGE", energy_source="Solar/Gebäude", power=(40, 100),
                    period=("2023-01-01", "2023-12-31"), feed_in_tariff=7.1),
        make_record("SgK-SMALL", energy_source="Solar/Gebäude", power=(0, 10),
                    period=("2023-01-01", "2023-12-31"), **rates),
        make_record("SgK-MID", energy_source="Solar/Gebäude", power=(10, 40),
                    period=("2023-01-01", "2023-12-31"), feed_in_tariff=7.9),
    ])


@pytest.fixture
def client(store):
    app.dependency_overrides[get_tariff_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def http():
    with patch("app.services.webhook_service.requests.patch") as patch_mock, \
         patch("app.services.webhook_service.requests.post") as post_mock:
        patch_mock.return_value = ok_response()
        post_mock.return_value = ok_response()
        yield patch_mock, post_mock


class TestWebhookFlow:

    def test_applies_best_match_and_resumes(self, client, http):
        patch_mock, post_mock = http
        response = client.post(
            "/api/v1/webhook",
            json=payload(energietraeger="Solar/Gebäude", inbetriebnahme="2023-05-01", leistung_kw=25),
            headers=HEADERS,
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        url = patch_mock.call_args.args[0]
        assert url == f"{settings.ENTITY_API_URL}/v1/entity/installation/e-1"
        assert patch_mock.call_args.kwargs["headers"] == {"Authorization": "Bearer secret-token"}
        update = patch_mock.call_args.kwargs["json"]
        assert update["tariff_category"] == "SgK-MID"
        assert update["einspeise_verguetung_in_ctkwh"] == 7.9
        assert "processed_at" in update

        post_mock.assert_called_once()
        assert post_mock.call_args.args[0] == CALLBACK_URL
        assert post_mock.call_args.kwargs["json"] == {"resume_token": "resume-42"}

    def test_without_power_takes_smallest_installation(self, client, http):
        patch_mock, _ = http
        client.post("/api/v1/webhook", json=payload(energietraeger="Solar/Gebäude"), headers=HEADERS)
        update = patch_mock.call_args.kwargs["json"]
        assert update["tariff_category"] == "SgK-SMALL"
        assert update["mieterstromzuschlag_ctkwh"] == 2.6
        assert update["ausfall_verguetung_in_ctkwh"] == 6.9
        assert update["anzulegender_wert_in_ctkwh"] == 8.6
        assert update["einspeise_verguetung_in_ctkwh"] == 8.2

    def test_commissioning_timestamp(self, client, http, store):
        patch_mock, _ = http
        client.post(
            "/api/v1/webhook",
            json=payload(energietraeger="Solar/Gebäude", inbetriebnahme="2023-05-01T00:00:00.000Z", leistung_kw="5"),
            headers=HEADERS,
        )
        assert patch_mock.call_args.kwargs["json"]["tariff_category"] == "SgK-SMALL"

    def test_no_match_marks_unknown_and_resumes(self, client, http):
        patch_mock, post_mock = http
        response = client.post(
            "/api/v1/webhook",
            json=payload(energietraeger="Solar/Gebäude", inbetriebnahme="1999-01-01"),
            headers=HEADERS,
        )
        assert response.status_code == 200
        update = patch_mock.call_args.kwargs["json"]
        assert update["tariff_category"] == UNKNOWN_INSTALLATION
        assert "einspeise_verguetung_in_ctkwh" not in update
        post_mock.assert_called_once()

    def test_missing_energy_source_still_resumes(self, client, http, store):
        patch_mock, post_mock = http
        response = client.post("/api/v1/webhook", json=payload(leistung_kw=10), headers=HEADERS)
        assert response.status_code == 200
        assert patch_mock.call_args.kwargs["json"]["tariff_category"] == UNKNOWN_INSTALLATION
        assert store.lookups == []
        post_mock.assert_called_once()


class TestWebhookFailures:

    def test_missing_token(self, client, http):
        response = client.post("/api/v1/webhook", json=payload(energietraeger="Wind"))
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Missing x-epilot-token header"}

    def test_missing_body(self, client, http):
        response = client.post("/api/v1/webhook", headers=HEADERS)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "No body provided"}

    def test_malformed_payload(self, client, http):
        response = client.post("/api/v1/webhook", json={"data": {}}, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_callback_rejected(self, client, http):
        _, post_mock = http
        post_mock.return_value = MagicMock(ok=False, status_code=503, reason="Service Unavailable")
        response = client.post("/api/v1/webhook", json=payload(energietraeger="Solar/Gebäude"), headers=HEADERS)
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Callback failed"}

    def test_callback_unreachable(self, client, http):
        _, post_mock = http
        post_mock.side_effect = requests.ConnectionError("refused")
        response = client.post("/api/v1/webhook", json=payload(energietraeger="Solar/Gebäude"), headers=HEADERS)
        assert response.status_code == 500
        assert response.json()["error"] == "Callback failed"

    def test_entity_update_rejected(self, client, http):
        patch_mock, post_mock = http
        patch_mock.return_value.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
        response = client.post("/api/v1/webhook", json=payload(energietraeger="Solar/Gebäude"), headers=HEADERS)
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Entity update failed"}
        post_mock.assert_not_called()

    def test_store_failure(self, fake_store_factory, http):
        _, post_mock = http
        app.dependency_overrides[get_tariff_store] = lambda: fake_store_factory(fail_on_read=True)
        try:
            response = TestClient(app).post(
                "/api/v1/webhook", json=payload(energietraeger="Wind"), headers=HEADERS
            )
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 500
        post_mock.assert_not_called()


class TestEntityUpdate:

    def test_unknown_installation(self):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert build_entity_update(None, now) == {
            "processed_at": "2025-01-01T00:00:00+00:00",
            "tariff_category": UNKNOWN_INSTALLATION,
        }

    def test_rates_from_record(self, make_record):
        record = make_record("SgK1", feed_in_tariff=8.0, reference_value=8.4)
        update = build_entity_update(record)
        assert update["tariff_category"] == "SgK1"
        assert update["einspeise_verguetung_in_ctkwh"] == 8.0
        assert update["anzulegender_wert_in_ctkwh"] == 8.4
        assert update["ausfall_verguetung_in_ctkwh"] is None
