"""Verification email delivery: SMTP with a Jinja2 template, or log-only when SMTP is unset."""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tuneshare.core.errors import DependencyError

if TYPE_CHECKING:
    from tuneshare.core.config import Settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
VERIFICATION_SUBJECT = "Verify your Tuneshare account"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


class Mailer(Protocol):
    def send_verification_email(self, to_email: str, code: str) -> None: ...


def render_verification_email(code: str, ttl_hours: int) -> str:
    return _env.get_template("verification.html").render(code=code, ttl_hours=ttl_hours)


class SmtpMailer:
    """Sends mail through an SMTP relay with STARTTLS. Raises DependencyError on any failure."""

    def __init__(self, settings: Settings) -> None:
        if not settings.SMTP_HOST:
            raise ValueError("SMTP_HOST must be set to use SmtpMailer")
        self._host = settings.SMTP_HOST
        self._port = settings.SMTP_PORT
        self._user = settings.SMTP_USER
        self._password = (
            settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else None
        )
        self._sender = settings.SMTP_FROM
        self._timeout = settings.SMTP_TIMEOUT_SEC
        self._ttl_hours = settings.VERIFICATION_CODE_TTL_HOURS

    def send_verification_email(self, to_email: str, code: str) -> None:
        msg = MIMEMultipart()
        msg["From"] = self._sender
        msg["To"] = to_email
        msg["Subject"] = VERIFICATION_SUBJECT
        msg.attach(MIMEText(render_verification_email(code, self._ttl_hours), "html"))

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                server.starttls()
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.sendmail(self._sender, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise DependencyError(f"Failed to send verification email: {e}") from e
        logger.info("Verification email sent", extra={"smtp_host": self._host})


class LoggingMailer:
    """Dev fallback: writes the code to the log instead of sending it."""

    def send_verification_email(self, to_email: str, code: str) -> None:
        logger.warning(
            "SMTP not configured; verification code for %s is %s", to_email, code
        )


def build_mailer(settings: Settings) -> Mailer:
    if settings.SMTP_HOST:
        return SmtpMailer(settings)
    return LoggingMailer()
