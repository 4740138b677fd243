"""Service for sending transactional emails."""

import html
import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: str = "",
        smtp_port: int = 587,
        smtp_username: str = "",
        smtp_password: str = "",
        from_email: str = "",
        from_name: str = "Bebaby App",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_account_status_email(self, to_email: str, *, blocked: bool, reason: Optional[str]) -> bool:
        """
        Tell a member their account was blocked or removed after a report.

        Args:
            to_email: Recipient email
            blocked: True for a ban, False for a removal
            reason: Administrator notes shown as the motive

        Returns:
            True if sent successfully, False otherwise
        """
        if blocked:
            subject = "Account blocked - Bebaby App"
            headline = "Your account has been blocked"
            summary = "Your Bebaby App account was blocked"
        else:
            subject = "Account removed - Bebaby App"
            headline = "Your account has been removed"
            summary = "Your Bebaby App account was removed"
        motive = html.escape(reason or "Violation of the community guidelines")
        html_body = f"""
        <h2>{headline}</h2>
        <p>Hello,</p>
        <p>{summary} following a report from another member.</p>
        <p><strong>Reason:</strong> {motive}</p>
        <p>If you believe this was a mistake, please get in touch with us.</p>
        <p>Kind regards,<br>The Bebaby App team</p>
        """
        text_body = f"{headline}\n\n{summary} following a report from another member.\nReason: {motive}\n"
        return self._send_email(to_email, subject, html_body, text_body)

    def send_premium_email(
        self,
        to_email: str,
        *,
        name: Optional[str],
        premium: bool,
        expiry: Optional[datetime],
    ) -> bool:
        display_name = html.escape(name or "member")
        if premium:
            subject = "Your Premium plan is active!"
            body = "Your Premium plan was activated. You now have access to every exclusive feature."
        else:
            subject = "Your Premium plan was deactivated"
            body = "Your Premium plan was deactivated. You can reactivate it at any time."
        expiry_line = f"<p>Your plan expires on {expiry:%d/%m/%Y}.</p>" if premium and expiry else ""
        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2 style="color: #ec4899;">Bebaby App</h2>
            <p>Hello {display_name}!</p>
            <p>{body}</p>
            {expiry_line}
            <p>Thank you for using Bebaby App!</p>
        </div>
        """
        return self._send_email(to_email, subject, html_body, f"Hello {display_name}!\n\n{body}\n")

    def send_new_report_email(
        self,
        to_email: str,
        *,
        reporter: str,
        reported: str,
        reason: str,
        description: Optional[str],
    ) -> bool:
        subject = "New report filed - Bebaby App"
        html_body = f"""
        <h2>New report filed</h2>
        <p><strong>Reporter:</strong> {html.escape(reporter)}</p>
        <p><strong>Reported:</strong> {html.escape(reported)}</p>
        <p><strong>Reason:</strong> {html.escape(reason)}</p>
        <p><strong>Description:</strong> {html.escape(description or "Not provided")}</p>
        <p>Open the admin dashboard to review this report.</p>
        """
        text_body = f"New report: {reporter} reported {reported}. Reason: {reason}\n"
        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Returns:
            True if sent (or logged while the transport is disabled), False on failure
        """
        if not self.enabled:
            logger.info("Email transport disabled; would send %r to %s", subject, to_email)
            return True

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email %r to %s: %s", subject, to_email, exc)
            return False
