"""
Confirmation mail sender for the events service.
"""

import html
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from shared.logging import get_logger
from shared.errors import NotificationError


CONFIRMATION_SUBJECT = "Your Event Ticket Confirmation - Sydney Events"

_TEXT_TEMPLATE = """\
Your Event Ticket Confirmation

Thank you for your interest in the event. Your ticket information is ready!

Access Your Tickets:
{event_url}

If you have any questions, please don't hesitate to contact us.

Best regards,
The Sydney Events Team
"""

_HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8fafc;">
  <div style="background-color: #ffffff; padding: 30px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1);">
    <div style="text-align: center; margin-bottom: 30px;">
      <h1 style="color: #2563eb; margin: 0; font-size: 24px;">Your Event Ticket Confirmation</h1>
    </div>
    <p style="color: #1e293b; font-size: 16px; line-height: 1.6;">
      Thank you for your interest in the event. Your ticket information is ready!
    </p>
    <div style="background-color: #f1f5f9; padding: 20px; border-radius: 6px; margin-bottom: 30px;">
      <h2 style="color: #1e293b; font-size: 18px; margin-top: 0;">Access Your Tickets</h2>
      <p style="color: #64748b; margin-bottom: 20px;">Click the button below to view and purchase your tickets:</p>
      <div style="text-align: center;">
        <a href="{event_url}" style="background-color: #2563eb; color: white; padding: 14px 28px; text-decoration: none; border-radius: 6px; display: inline-block; font-weight: bold;">View Your Tickets</a>
      </div>
    </div>
    <div style="border-top: 1px solid #e2e8f0; padding-top: 20px; margin-top: 30px;">
      <p style="color: #64748b; font-size: 14px; margin-bottom: 10px;">
        If the button above doesn't work, you can copy and paste this link into your browser:
      </p>
      <p style="color: #2563eb; word-break: break-all; font-size: 14px; background-color: #f1f5f9; padding: 10px; border-radius: 4px;">{event_url}</p>
    </div>
    <p style="color: #64748b; font-size: 14px; margin-top: 30px;">
      Best regards,<br>
      <strong>The Sydney Events Team</strong>
    </p>
  </div>
</div>
"""


class ConfirmationMailer:
    """Sends the ticket confirmation email through an SMTP relay."""

    def __init__(
        self,
        username: Optional[str],
        password: Optional[str],
        hostname: str = "smtp.gmail.com",
        port: int = 465,
        sender: Optional[str] = None,
        metrics=None,
    ):
        self.username = username
        self.password = password
        self.hostname = hostname
        self.port = port
        self.sender = sender or username
        self.metrics = metrics
        self.logger = get_logger("events.mailer")

    def compose(self, to: str, event_url: str) -> EmailMessage:
        """Build the multipart (text + HTML) confirmation message."""
        message = EmailMessage()
        message["From"] = self.sender or ""
        message["To"] = to
        message["Subject"] = CONFIRMATION_SUBJECT
        message.set_content(_TEXT_TEMPLATE.format(event_url=event_url))
        message.add_alternative(
            _HTML_TEMPLATE.format(event_url=html.escape(event_url, quote=True)),
            subtype="html",
        )
        return message

    async def send_confirmation(self, to: str, event_url: str) -> None:
        """Send the confirmation email; raise NotificationError on failure."""
        message = self.compose(to, event_url)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.port == 465,
            )
        except (aiosmtplib.SMTPException, OSError, ValueError) as exc:
            self.logger.error("Error sending email", to=to, error=str(exc))
            self._record("error")
            raise NotificationError(details="Failed to send email")

        self._record("sent")
        self.logger.info("Email sent successfully", to=to)

    def _record(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("emails_sent_total", result=result)
