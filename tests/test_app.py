import json
from io import BytesIO

import pytest
from openpyxl import load_workbook

from api.app import create_app
from timecards.modules.timecard_factory import TimecardFactory

from conftest import MONDAY, entry


class FakeConverter:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def convert(self, data, filename="timecard.xlsx"):
        self.calls.append(filename)
        if self.fail:
            raise RuntimeError("soffice kaputt")
        return b"%PDF-fake"


class FakeMailer:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send_timecard(self, to, cc, subject, body, attachment, employee_name):
        if self.fail:
            raise RuntimeError("SMTP not configured")
        self.sent.append((to, cc, subject, body, attachment, employee_name))


def payload(**extra):
    data = {
        "employee_name": "JaneDoe",
        "pay_period_num": 1,
        "year": 2025,
        "jobs": [{"job_code": "29699", "job_name": "201"}],
        "weeks": [{"week_number": 1, "week_start_date": MONDAY, "week_label": "W1", "entries": [entry("29699", 8)]}],
    }
    data.update(extra)
    return data


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(template_file, converter, mailer):
    app = create_app(factory=TimecardFactory(template_file), converter=converter, mailer=mailer)
    return app.test_client()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.data == b"OK"
    assert "Access-Control-Allow-Origin" not in response.headers


def test_generate_timecard(client):
    response = client.post("/api/generate-timecard", json=payload())
    assert response.status_code == 200
    assert response.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "timecard_JaneDoe.xlsx" in response.headers["Content-Disposition"]
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["X-Timecard-Dropped-Keys"] == "0"
    ws = load_workbook(BytesIO(response.data))["Week 1"]
    assert ws["C5"].value == 8


def test_json_without_content_type(client):
    response = client.post("/api/generate-timecard", data=json.dumps(payload()))
    assert response.status_code == 200
    ws = load_workbook(BytesIO(response.data))["Week 1"]
    assert ws["C5"].value == 8


def test_invalid_json_is_client_error(client):
    response = client.post("/api/generate-timecard", data="{not json", content_type="application/json")
    assert response.status_code == 400
    assert response.data.startswith(b"invalid request")


def test_non_numeric_hours_is_client_error(client):
    bad = payload()
    bad["weeks"][0]["entries"][0]["hours"] = "eight"
    response = client.post("/api/generate-timecard", json=bad)
    assert response.status_code == 400


def test_get_not_allowed(client):
    assert client.get("/api/generate-timecard").status_code == 405


def test_preflight(client):
    response = client.options("/api/generate-pdf")
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Methods"] == "POST, GET, OPTIONS"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"


def test_generate_pdf(client, converter):
    response = client.post("/api/generate-pdf", json=payload())
    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data == b"%PDF-fake"
    assert "timecard_JaneDoe.pdf" in response.headers["Content-Disposition"]
    assert converter.calls == ["timecard_JaneDoe.xlsx"]


def test_pdf_conversion_failure_is_server_error(template_file):
    app = create_app(factory=TimecardFactory(template_file), converter=FakeConverter(fail=True), mailer=FakeMailer())
    response = app.test_client().post("/api/generate-pdf", json=payload())
    assert response.status_code == 500
    assert b"error converting to PDF" in response.data


def test_email_timecard(client, mailer):
    response = client.post(
        "/api/email-timecard",
        json=payload(to="boss@example.com", cc="hr@example.com", subject="Timecard", body="Attached."),
    )
    assert response.status_code == 200
    assert json.loads(response.data) == {"status": "success", "message": "Email sent to boss@example.com"}
    to, cc, subject, body, attachment, employee = mailer.sent[0]
    assert (to, cc, subject, body, employee) == ("boss@example.com", "hr@example.com", "Timecard", "Attached.", "JaneDoe")
    assert attachment[:2] == b"PK"


def test_email_failure_is_server_error(template_file):
    app = create_app(factory=TimecardFactory(template_file), converter=FakeConverter(), mailer=FakeMailer(fail=True))
    response = app.test_client().post("/api/email-timecard", json=payload(to="boss@example.com"))
    assert response.status_code == 500
    assert b"error sending email" in response.data


def test_email_requires_recipient(client):
    assert client.post("/api/email-timecard", json=payload()).status_code == 400


def test_dropped_keys_header(client):
    many = payload()
    many["weeks"][0]["entries"] = [entry(str(100 + i), 1) for i in range(17)]
    response = client.post("/api/generate-timecard", json=many)
    assert response.headers["X-Timecard-Dropped-Keys"] == "1"


def test_missing_template_still_returns_workbook(tmp_path):
    app = create_app(factory=TimecardFactory(tmp_path / "none.xlsx"), converter=FakeConverter(), mailer=FakeMailer())
    response = app.test_client().post("/api/generate-timecard", json=payload())
    assert response.status_code == 200
    ws = load_workbook(BytesIO(response.data))["Sheet1"]
    assert ws["A1"].value == "Employee:"
