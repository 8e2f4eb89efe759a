"""
SMTP mailer.

Blocking ``smtplib`` calls run in Starlette's threadpool so the event loop
is never held by a slow mail server.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid

from starlette.concurrency import run_in_threadpool

from src.core.config import settings
from src.schemas.integrations import SendEmailResult

logger = logging.getLogger(__name__)


class SmtpMailer:
    """
    Send plain-text (and optional HTML) e-mail through the configured server.

    Never raises for delivery problems: the outcome is reported in the
    returned ``SendEmailResult``.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        secure: bool | None = None,
        timeout: float | None = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.user = user if user is not None else settings.smtp_user
        # App passwords are often displayed with spaces
        raw_password = password if password is not None else settings.smtp_pass
        self.password = "".join((raw_password or "").split())
        self.sender = sender or settings.smtp_from or self.user
        self.secure = (secure if secure is not None else settings.smtp_secure) or self.port == 465
        self.timeout = timeout or settings.http_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    def build_message(self, to: str, subject: str, body: str, html: str | None = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body or "")
        message.add_alternative(html or body or "", subtype="html")
        return message

    def send_sync(self, to: str, subject: str, body: str, html: str | None = None) -> SendEmailResult:
        if not self.configured:
            logger.warning(f"Email not sent - SMTP not configured (recipient {to})")
            return SendEmailResult(sent=False, message="SMTP not configured")

        message = self.build_message(to, subject, body, html)
        try:
            if self.secure:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self.host, self.port, timeout=self.timeout, context=context
                ) as server:
                    server.login(self.user, self.password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                    server.login(self.user, self.password)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email send to {to} failed: {e}")
            return SendEmailResult(sent=False, error=str(e))

        logger.info(f"Email sent to {to} (message_id={message['Message-ID']})")
        return SendEmailResult(sent=True, message_id=message["Message-ID"])

    async def send(self, to: str, subject: str, body: str, html: str | None = None) -> SendEmailResult:
        return await run_in_threadpool(self.send_sync, to, subject, body, html)
