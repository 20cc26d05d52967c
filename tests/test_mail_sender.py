import smtplib
from datetime import date

import pytest

from pydantic_models.config.smtp_config import SmtpConfig
from timecards.modules import mail_sender
from timecards.modules.mail_sender import MailSender, attachment_name


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg, from_addr=None, to_addrs=None):
        self.sent.append((msg, from_addr, to_addrs))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mail_sender.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def configured_sender(**overrides):
    smtp = SmtpConfig(**{"host": "smtp.example.com", "port": 587, "user": "bot@example.com", **overrides})
    return MailSender(smtp, "secret")


def test_attachment_name():
    assert attachment_name("Jane Q Doe", date(2025, 1, 10)) == "timecard_Jane_Q_Doe_2025-01-10.xlsx"


def test_sends_to_all_recipients(fake_smtp):
    msg = configured_sender().send_timecard(
        "a@example.com, b@example.com",
        " c@example.com ",
        "Timecard",
        "See attached.",
        b"xlsx",
        "Jane Doe",
        today=date(2025, 1, 10),
    )
    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.started_tls is True
    assert server.logged_in == ("bot@example.com", "secret")
    _, from_addr, to_addrs = server.sent[0]
    assert from_addr == "bot@example.com"
    assert to_addrs == ["a@example.com", "b@example.com", "c@example.com"]

    assert msg["To"] == "a@example.com, b@example.com"
    assert msg["Cc"] == "c@example.com"
    assert msg["Subject"] == "Timecard"
    attachments = list(msg.iter_attachments())
    assert len(attachments) == 1
    assert attachments[0].get_filename() == "timecard_Jane_Doe_2025-01-10.xlsx"
    assert attachments[0].get_content_type() == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert attachments[0].get_content() == b"xlsx"


def test_from_address_overrides_user(fake_smtp):
    configured_sender(from_address="payroll@example.com").send_timecard("a@example.com", None, "s", "b", b"x", "Jane")
    _, from_addr, _ = fake_smtp.instances[0].sent[0]
    assert from_addr == "payroll@example.com"


def test_unconfigured_smtp_raises(fake_smtp):
    with pytest.raises(RuntimeError, match="SMTP not configured"):
        MailSender(SmtpConfig(host="smtp.example.com", port=587), None).send_timecard(
            "a@example.com", None, "s", "b", b"x", "Jane"
        )
    assert fake_smtp.instances == []


def test_smtp_failure_is_wrapped(monkeypatch):
    class BrokenSMTP(FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(mail_sender.smtplib, "SMTP", BrokenSMTP)
    with pytest.raises(RuntimeError, match="Mailversand fehlgeschlagen"):
        configured_sender().send_timecard("a@example.com", None, "s", "b", b"x", "Jane")
