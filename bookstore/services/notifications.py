"""
Order notifications.

Plain-text emails rendered from Jinja2 templates and sent through
fastapi-mail. Both senders are meant to be registered as post-commit hooks on
the order service; when mail is not configured they only log.
"""

import logging
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, PackageLoader

from ..core.config import Settings
from ..models.order import Order

logger = logging.getLogger(__name__)


def build_mailer(settings: Settings) -> FastMail:
    """Create a FastMail client from settings"""
    conf = ConnectionConfig(
        MAIL_USERNAME=settings.smtp_user,
        MAIL_PASSWORD=settings.smtp_password,
        MAIL_FROM=settings.mail_from,
        MAIL_PORT=settings.smtp_port,
        MAIL_SERVER=settings.smtp_host,
        MAIL_STARTTLS=settings.mail_starttls,
        MAIL_SSL_TLS=settings.mail_ssl_tls,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )
    return FastMail(conf)


class NotificationService:
    """Sends the owner alert and the customer confirmation for new orders"""

    def __init__(self, settings: Settings, mailer: Optional[FastMail] = None):
        self.settings = settings
        self.mailer = mailer
        if self.mailer is None and settings.mail_configured:
            self.mailer = build_mailer(settings)
        self._templates = Environment(
            loader=PackageLoader("bookstore", "templates"),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, order: Order) -> str:
        """Render a notification body for an order"""
        template = self._templates.get_template(template_name)
        return template.render(order=order, currency=self.settings.currency_symbol)

    async def _send(self, recipient: str, subject: str, body: str) -> None:
        if self.mailer is None:
            logger.info(f"Mail disabled, skipping '{subject}' to {recipient}")
            return

        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=body,
            subtype=MessageType.plain,
        )
        await self.mailer.send_message(message)
        logger.info(f"Sent '{subject}' to {recipient}")

    async def notify_owner(self, order: Order) -> None:
        """Alert the shop owner about a new order"""
        if not self.settings.owner_email:
            logger.warning(f"No owner email configured, order {order.order_id} alert not sent")
            return
        body = self.render("owner_notification.txt", order)
        await self._send(
            self.settings.owner_email,
            f"New Order Received - {order.order_id}",
            body,
        )

    async def confirm_customer(self, order: Order) -> None:
        """Send the order confirmation to the customer"""
        body = self.render("customer_confirmation.txt", order)
        await self._send(
            order.customer.email,
            f"Order Confirmation - {order.order_id}",
            body,
        )

    def hooks(self) -> list:
        """Post-commit hooks in the order they should run"""
        return [self.notify_owner, self.confirm_customer]
