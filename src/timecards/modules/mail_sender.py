from __future__ import annotations

import smtplib
from datetime import date
from email.message import EmailMessage
from typing import List, Optional

from loguru import logger

from pydantic_models.config.smtp_config import SmtpConfig
from shared_modules.config import Config
from shared_modules.utils import split_csv_addresses

XLSX_MAINTYPE = "application"
XLSX_SUBTYPE = "vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SSL_PORT = 465


def attachment_name(employee_name: str, today: Optional[date] = None) -> str:
    """timecard_<Name_mit_Unterstrichen>_<YYYY-MM-DD>.xlsx"""
    day = today or date.today()
    return f"timecard_{employee_name.replace(' ', '_')}_{day.isoformat()}.xlsx"


def build_message(
    sender: str,
    to: List[str],
    cc: List[str],
    subject: str,
    body: str,
    attachment: bytes,
    filename: str,
) -> EmailMessage:
    """Baut eine multipart/mixed-Nachricht mit Text und Excel-Anhang."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = ", ".join(to)
    if cc:
        msg["Cc"] = ", ".join(cc)
    msg["Subject"] = subject
    msg.set_content(body)
    if attachment:
        msg.add_attachment(attachment, maintype=XLSX_MAINTYPE, subtype=XLSX_SUBTYPE, filename=filename)
    return msg


class MailSender:
    """
    Versendet Stundenzettel per SMTP.
    Host, Port, Benutzer und Passwort sind Pflicht; Absender ist sonst der Benutzer.
    """

    def __init__(self, smtp: SmtpConfig, password: Optional[str]) -> None:
        self.smtp = smtp
        self.password = password

    @classmethod
    def from_config(cls, config: Config) -> "MailSender":
        return cls(config.smtp, config.get_smtp_password())

    def _check_configured(self) -> None:
        if not (self.smtp.host and self.smtp.port and self.smtp.user and self.password):
            logger.error("SMTP nicht konfiguriert (SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS).")
            raise RuntimeError("SMTP not configured")

    def send_timecard(
        self,
        to: str,
        cc: Optional[str],
        subject: str,
        body: str,
        attachment: bytes,
        employee_name: str,
        today: Optional[date] = None,
    ) -> EmailMessage:
        """
        Schickt den Stundenzettel an alle Empfänger aus `to` und `cc`
        (jeweils kommagetrennt).

        Raises:
            RuntimeError: Wenn SMTP nicht konfiguriert ist oder der Versand scheitert.
        """
        self._check_configured()
        recipients = split_csv_addresses(to)
        cc_recipients = split_csv_addresses(cc)
        if not recipients:
            raise RuntimeError("Kein Empfänger angegeben")
        sender = self.smtp.from_address or self.smtp.user

        msg = build_message(
            sender,
            recipients,
            cc_recipients,
            subject,
            body,
            attachment,
            attachment_name(employee_name, today),
        )
        try:
            self._deliver(msg, sender, recipients + cc_recipients)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Mailversand fehlgeschlagen: {e}")
            raise RuntimeError(f"Mailversand fehlgeschlagen: {e}") from e
        logger.info(f"Stundenzettel an {', '.join(recipients)} versendet.")
        return msg

    def _deliver(self, msg: EmailMessage, sender: str, recipients: List[str]) -> None:
        if self.smtp.port == SSL_PORT:
            client = smtplib.SMTP_SSL(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout_seconds)
        else:
            client = smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout_seconds)
        with client as server:
            if self.smtp.use_tls and self.smtp.port != SSL_PORT:
                server.starttls()
            server.login(self.smtp.user, self.password)
            server.send_message(msg, from_addr=sender, to_addrs=recipients)
