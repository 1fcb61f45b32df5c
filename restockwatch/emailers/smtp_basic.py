from __future__ import annotations
import smtplib
import ssl
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate
from typing import List, Optional

from .base import Notifier
from .templates import render_subject, render_body
from ..errors import NotifyError
from ..utils.log import get_logger
from ..watchers.base import NotificationEvent

logger = get_logger("restockwatch.smtp")


class SmtpNotifier(Notifier):
    """Plaintext email over SMTP with basic authentication.

    STARTTLS on the submission port by default; ``use_ssl=True`` switches to
    implicit TLS (port 465). A connection is opened per notify() and closed
    before it returns, whether or not the send succeeded.
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        recipients: List[str],
        mail_from: Optional[str] = None,
        use_ssl: bool = False,
        timeout: float = 30,
        sender_name: str = "Restock Watch",
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.recipients = list(recipients)
        self.mail_from = mail_from or user
        self.use_ssl = use_ssl
        self.timeout = timeout
        self.sender_name = sender_name

    def build_message(self, event: NotificationEvent) -> MIMEText:
        msg = MIMEText(render_body(event), "plain", "utf-8")
        msg["Subject"] = render_subject(event)
        msg["From"] = formataddr((self.sender_name, self.mail_from))
        msg["To"] = ", ".join(self.recipients)
        msg["Date"] = formatdate(localtime=True)
        return msg

    def notify(self, event: NotificationEvent) -> None:
        if not self.recipients:
            raise NotifyError("no recipients configured")
        msg = self.build_message(event)
        context = ssl.create_default_context()
        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                server.ehlo()
                if not self.use_ssl:
                    server.starttls(context=context)
                    server.ehlo()
                server.login(self.user, self.password)
                server.sendmail(self.mail_from, self.recipients, msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            raise NotifyError(f"SMTP authentication failed for {self.user}: {e}") from e
        except (smtplib.SMTPException, OSError) as e:
            raise NotifyError(f"SMTP send via {self.host}:{self.port} failed: {e}") from e
        logger.info("Email sent to %s (subject: %s)", self.recipients, msg["Subject"])
