"""
tests/test_crm_import_router.py

HTTP contract tests for the CRM import preview and funnel merge endpoints.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from app.main import create_app

LEADS_CSV = (
    "Project Name,Lead Created Date,Booked Date,Total Project Value\n"
    'Alpha,2024-01-05,2024-02-10,"$1,500.00"\n'
    "Beta,2024-01-20,,\n"
    ",2024-01-21,,\n"
)

BOOKED_CSV = (
    "First Name,Project Name,Project Type,Project Source,Project Creation Date,Booked Date,Total Booked Value\n"
    "Jane,Smith Wedding,Wedding,Instagram,2024-01-05,2024-05-10,$250\n"
    "John,Smith Wedding,Wedding,Instagram,2024-01-05,2024-05-10,$250\n"
)


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app())


def _upload(text: str | bytes, filename: str = "export.csv", content_type: str = "text/csv") -> dict:
    payload = text.encode("utf-8") if isinstance(text, str) else text
    return {"file": (filename, payload, content_type)}


class TestImportEndpoints:
    def test_leads_preview(self, client: TestClient) -> None:
        response = client.post("/imports/leads", files=_upload(LEADS_CSV))

        assert response.status_code == 200
        body = response.json()
        assert body["report_type"] == "leads"
        assert body["detected"] is False
        assert body["bookings"] == []
        assert [(b["year"], b["month"], b["inquiries"], b["closes"]) for b in body["funnel_data"]] == [
            (2024, 1, 2, 0),
            (2024, 2, 0, 1),
        ]
        assert body["funnel_data"][1]["bookings_revenue_cents"] == 150000
        assert body["warnings"] == ["Row 4: Skipping row with no project name"]
        assert body["errors"] == []

    def test_booked_clients_preview(self, client: TestClient) -> None:
        response = client.post("/imports/booked-clients", files=_upload(BOOKED_CSV))

        assert response.status_code == 200
        body = response.json()
        assert body["report_type"] == "booked_client"
        assert len(body["bookings"]) == 1
        booking = body["bookings"][0]
        assert booking["project_name"] == "Smith Wedding"
        assert booking["date_booked"] == "2024-05-10"
        assert booking["booked_revenue_cents"] == 25000
        assert [entity["name"] for entity in body["service_types"]] == ["Wedding"]
        assert body["service_types"][0]["is_custom"] is True

    def test_auto_detects_report_type(self, client: TestClient) -> None:
        response = client.post("/imports/auto", files=_upload(BOOKED_CSV))

        assert response.status_code == 200
        assert response.json()["report_type"] == "booked_client"
        assert response.json()["detected"] is True

    def test_auto_accepts_explicit_report_type(self, client: TestClient) -> None:
        response = client.post("/imports/auto", params={"report_type": "leads"}, files=_upload(LEADS_CSV))

        assert response.status_code == 200
        assert response.json()["report_type"] == "leads"
        assert response.json()["detected"] is False

    def test_unknown_report_type_is_bad_request(self, client: TestClient) -> None:
        response = client.post("/imports/auto", params={"report_type": "invoices"}, files=_upload(LEADS_CSV))

        assert response.status_code == 400
        assert "invoices" in response.json()["detail"]

    def test_existing_catalog_is_used(self, client: TestClient) -> None:
        service_types = json.dumps([{"id": "st-1", "name": "wedding"}])
        lead_sources = json.dumps([{"id": "ls-1", "name": "Instagram", "is_custom": False}])

        response = client.post(
            "/imports/booked-clients",
            files=_upload(BOOKED_CSV),
            data={"service_types": service_types, "lead_sources": lead_sources},
        )

        assert response.status_code == 200
        booking = response.json()["bookings"][0]
        assert booking["service_type_id"] == "st-1"
        assert booking["lead_source_id"] == "ls-1"

    def test_malformed_catalog_is_unprocessable(self, client: TestClient) -> None:
        response = client.post(
            "/imports/booked-clients",
            files=_upload(BOOKED_CSV),
            data={"service_types": "[{\"name\": \"missing id\"}]"},
        )

        assert response.status_code == 422
        assert "service_types" in response.json()["detail"]

    def test_empty_file_reports_no_headers(self, client: TestClient) -> None:
        response = client.post("/imports/leads", files=_upload(""))

        assert response.status_code == 200
        assert response.json()["errors"] == ["No headers found in CSV file"]

    def test_non_csv_upload_is_rejected(self, client: TestClient) -> None:
        response = client.post("/imports/leads", files=_upload(LEADS_CSV, "export.pdf", "application/pdf"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Only CSV files are allowed."

    def test_non_utf8_upload_is_rejected(self, client: TestClient) -> None:
        response = client.post("/imports/leads", files=_upload(b"Project Name\n\xff\xfe\xfa\n"))

        assert response.status_code == 400
        assert response.json()["detail"] == "CSV must be UTF-8 encoded."

    def test_byte_order_mark_is_ignored(self, client: TestClient) -> None:
        response = client.post("/imports/leads", files=_upload(b"\xef\xbb\xbf" + LEADS_CSV.encode("utf-8")))

        assert response.status_code == 200
        assert response.json()["funnel_data"][0]["inquiries"] == 2


class TestFunnelMergeEndpoint:
    def test_merges_and_rerolls(self, client: TestClient) -> None:
        payload = {
            "leads": [
                {"year": 2024, "month": 1, "inquiries": 4, "closes": 3, "bookings_revenue_cents": 900},
                {"year": 2024, "month": 2, "inquiries": 2},
            ],
            "booked": [{"year": 2024, "month": 2, "closes": 1, "bookings_revenue_cents": 5000}],
        }

        response = client.post("/funnel/merge", json=payload)

        assert response.status_code == 200
        data = response.json()["funnel_data"]
        assert [(b["month"], b["inquiries"], b["closes"], b["inquiries_ytd"], b["bookings_ytd"]) for b in data] == [
            (1, 4, 0, 4, 0),
            (2, 2, 1, 6, 5000),
        ]

    def test_null_booked_keeps_leads_closes(self, client: TestClient) -> None:
        payload = {"leads": [{"year": 2024, "month": 1, "inquiries": 4, "closes": 3}], "booked": None}

        response = client.post("/funnel/merge", json=payload)

        assert response.json()["funnel_data"][0]["closes"] == 3

    def test_invalid_month_is_rejected(self, client: TestClient) -> None:
        response = client.post("/funnel/merge", json={"leads": [{"year": 2024, "month": 13}]})

        assert response.status_code == 422


class TestHealthEndpoint:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
