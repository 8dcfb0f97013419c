"""
Ticket confirmation emails

Sending happens after the booking transaction has committed and runs as a
FastAPI background task; nothing here can undo or delay a booking.
"""
import logging
import smtplib
from email.message import EmailMessage

from flight_booking.core.config import Settings
from flight_booking.core.metrics import notifications_total

logger = logging.getLogger(__name__)


def build_confirmation_message(ticket: dict, sender: str) -> EmailMessage:
    seat = ticket.get('seat_number') or 'Unassigned'

    msg = EmailMessage()
    msg['Subject'] = f"Your Ticket #{ticket['id']} Confirmation"
    msg['From'] = sender
    msg['To'] = ticket['passenger_email']
    msg.set_content(
        f"Hello {ticket['passenger_name']},\n\n"
        f"Your ticket (#{ticket['id']}) for flight {ticket['flight_id']} is confirmed.\n"
        f"Seat: {seat}\n\n"
        "Thank you for booking with us."
    )
    msg.add_alternative(
        f"<p>Hello {ticket['passenger_name']},</p>\n"
        "<ul>\n"
        f"  <li><strong>Ticket ID:</strong> {ticket['id']}</li>\n"
        f"  <li><strong>Flight ID:</strong> {ticket['flight_id']}</li>\n"
        f"  <li><strong>Seat:</strong> {seat}</li>\n"
        "</ul>\n"
        "<p>Thank you for booking with us.</p>",
        subtype='html',
    )
    return msg


class EmailNotifier:
    """Sends ticket confirmations through SMTP"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def send_ticket_confirmation(self, ticket: dict) -> bool:
        """Send the confirmation; returns False when SMTP is not configured"""
        if not self.settings.smtp_configured:
            logger.info(f"SMTP not configured; skipping confirmation for ticket {ticket['id']}",
                        extra={'ticket_id': ticket['id']})
            notifications_total.labels(outcome='skipped').inc()
            return False

        msg = build_confirmation_message(ticket, self.settings.EMAIL_FROM)
        with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as smtp:
            if self.settings.SMTP_USE_TLS:
                smtp.starttls()
            if self.settings.SMTP_USER:
                smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD or '')
            smtp.send_message(msg)

        notifications_total.labels(outcome='sent').inc()
        logger.info(f"Confirmation sent for ticket {ticket['id']}", extra={'ticket_id': ticket['id']})
        return True


def notify_ticket_purchased(notifier, ticket: dict) -> None:
    """Background task: a failed email is logged, never raised"""
    try:
        notifier.send_ticket_confirmation(ticket)
    except Exception as e:
        notifications_total.labels(outcome='failed').inc()
        logger.error(f"Email send error for ticket {ticket.get('id')}: {e}",
                     extra={'ticket_id': ticket.get('id')})
