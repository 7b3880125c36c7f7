"""Best-effort email notifications.

Sending never raises: failures are logged and the request carries on.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, *, to: Sequence[str], subject: str, body: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class SMTPSettings:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True
    timeout: int = 10

    @classmethod
    def from_dict(cls, cfg: Optional[dict]) -> Optional["SMTPSettings"]:
        if not cfg or not cfg.get("host"):
            return None
        return cls(
            host=str(cfg["host"]),
            port=int(cfg.get("port", 587)),
            user=str(cfg.get("user", "")),
            password=str(cfg.get("password", "")),
            sender=str(cfg.get("sender") or cfg.get("user", "")),
            use_tls=bool(cfg.get("use_tls", True)),
            timeout=int(cfg.get("timeout", 10)),
        )


class NullNotifier(Notifier):
    """Used when SMTP is not configured (development, tests)."""

    def send(self, *, to: Sequence[str], subject: str, body: str) -> bool:
        logger.debug("Email skipped (no SMTP configured): %s -> %s", subject, ", ".join(to))
        return False


class EmailNotifier(Notifier):
    def __init__(self, settings: SMTPSettings):
        self._settings = settings

    def _build(self, to: Sequence[str], subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = self._settings.sender
        msg["To"] = ", ".join(to)
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain", "utf-8"))
        return msg

    def send(self, *, to: Sequence[str], subject: str, body: str) -> bool:
        recipients = [addr for addr in to if addr]
        if not recipients:
            return False
        s = self._settings
        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as server:
                if s.use_tls:
                    server.starttls()
                if s.user:
                    server.login(s.user, s.password)
                server.send_message(self._build(recipients, subject, body))
            logger.info("Email sent: %s -> %s", subject, ", ".join(recipients))
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Email sending failed (%s): %s", subject, e)
            return False


def build_notifier(smtp_config: Optional[dict]) -> Notifier:
    settings = SMTPSettings.from_dict(smtp_config)
    return EmailNotifier(settings) if settings else NullNotifier()
