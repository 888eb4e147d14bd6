"""Contains all the code related to the emailing service"""

from __future__ import annotations

import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from services.templates import TemplateService
from utils.exceptions import EmailDeliveryError
from utils.logger import get_logger

logger = get_logger(__name__)

SUBJECTS = {
    "welcome": "Welcome to our platform!",
    "password_reset": "Password Reset Request",
    "enrollment_confirmation": "Enrollment Confirmed: {course_name}",
}


class EmailDispatcher(ABC):
    """Base dispatcher: renders a named template, then hands it to ``deliver``."""

    def __init__(self, from_email: str, from_name: str = "", frontend_url: str = "",
                 templates: Optional[TemplateService] = None):
        self.from_email = from_email
        self.from_name = from_name
        self.frontend_url = frontend_url
        self.templates = templates or TemplateService()

    @property
    def sender(self) -> str:
        if self.from_name:
            return f"{self.from_name} <{self.from_email}>"
        return self.from_email

    def subject_for(self, template: str, context: Dict[str, Any]) -> str:
        subject = SUBJECTS.get(template, template.replace("_", " ").title())
        try:
            return subject.format(**context)
        except KeyError as exc:
            raise EmailDeliveryError(f"Missing value {exc} for '{template}' subject")

    def send(self, to: str, template: str, context: Dict[str, Any]) -> None:
        """Render ``template`` with ``context`` and deliver it to ``to``.

        Raises:
            EmailDeliveryError: the template is missing or the backend refused the message.
        """
        data = {"frontend_url": self.frontend_url, "company_name": self.from_name, "email": to}
        data.update(context)
        try:
            html = self.templates.render_template(template, data)
        except FileNotFoundError as exc:
            raise EmailDeliveryError(str(exc))
        subject = self.subject_for(template, data)
        self.deliver(to, subject, html)
        logger.info("Email '%s' sent to %s", template, to)

    @abstractmethod
    def deliver(self, to: str, subject: str, html: str) -> None:
        """Hand a rendered message to the transport."""


class SMTPEmailDispatcher(EmailDispatcher):
    def __init__(self, host: str, port: int, username: str = "", password: str = "",
                 use_tls: bool = True, timeout: int = 10, **kwargs):
        super().__init__(**kwargs)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html"))
        return msg

    def deliver(self, to: str, subject: str, html: str) -> None:
        msg = self._build_message(to, subject, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to, exc)
            raise EmailDeliveryError(f"Failed to send email to {to}") from exc


class ConsoleEmailDispatcher(EmailDispatcher):
    """Development backend: writes the message to the log instead of sending it."""

    def deliver(self, to: str, subject: str, html: str) -> None:
        logger.info("Email to %s | %s\n%s", to, subject, html)


class MemoryEmailDispatcher(EmailDispatcher):
    """Keeps every delivered message in ``outbox``."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.outbox: List[Dict[str, str]] = []
        self.fail = False

    def deliver(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise EmailDeliveryError(f"Failed to send email to {to}")
        self.outbox.append({"to": to, "subject": subject, "html": html})

    def clear(self) -> None:
        self.outbox.clear()


def build_email_dispatcher(config) -> EmailDispatcher:
    """Pick a backend from ``EMAIL_BACKEND`` (smtp, console or memory)."""
    common = {
        "from_email": config.get("FROM_EMAIL", "noreply@example.com"),
        "from_name": config.get("FROM_NAME", ""),
        "frontend_url": config.get("FRONTEND_URL", ""),
    }
    backend = (config.get("EMAIL_BACKEND") or "console").lower()
    if backend == "smtp":
        return SMTPEmailDispatcher(
            host=config.get("SMTP_HOST", "localhost"),
            port=int(config.get("SMTP_PORT", 587)),
            username=config.get("SMTP_USER", ""),
            password=config.get("SMTP_PASS", ""),
            use_tls=bool(config.get("SMTP_USE_TLS", True)),
            **common,
        )
    if backend == "memory":
        return MemoryEmailDispatcher(**common)
    if backend == "console":
        return ConsoleEmailDispatcher(**common)
    raise ValueError(f"Unknown EMAIL_BACKEND '{backend}'")
