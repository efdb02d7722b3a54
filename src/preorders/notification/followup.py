"""Preorder follow-up — sends the confirmation email once per preorder.

Reacts to CartUpdated. The email goes out when the cart is a submitted,
non-deleted preorder with an email address whose follow-up has not been
sent yet. Only a successful send is recorded on the cart; a failed send
leaves the cart eligible, and the next CartUpdated tries again.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from preorders.cart.cart import Cart
from preorders.cart.events import CartUpdated
from preorders.cart.metadata import PreorderState
from preorders.domain import preorders
from preorders.notification.channel import get_email_channel
from preorders.notification.config import MailerConfig
from preorders.notification.templates.preorder_confirmation import PreorderConfirmationTemplate

logger = structlog.get_logger(__name__)


@preorders.event_handler(part_of=Cart)
class PreorderFollowupHandler:
    """Sends the preorder confirmation email."""

    @handle(CartUpdated)
    def on_cart_updated(self, event: CartUpdated) -> None:
        config = MailerConfig.from_env()
        if not config.is_configured:
            return

        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(event.cart_id)
        except ObjectNotFoundError:
            logger.info("CartUpdated for unknown cart, skipping follow-up", cart_id=str(event.cart_id))
            return

        if cart.preorder.state != PreorderState.PENDING_NOTIFICATION or not cart.email:
            return

        rendered = PreorderConfirmationTemplate.render({"store_name": config.store_name})

        try:
            result = get_email_channel(config).send(
                to=cart.email,
                subject=rendered["subject"],
                body=rendered["body"],
                html_body=rendered["html_body"],
                from_email=config.from_email,
                reply_to=config.reply_to,
            )
        except Exception as e:
            logger.error("Failed to send preorder email", cart_id=str(cart.id), error=str(e))
            return

        if result.get("status") != "sent":
            logger.error(
                "Failed to send preorder email",
                cart_id=str(cart.id),
                error=result.get("error", "Unknown dispatch error"),
            )
            return

        cart.record_followup_sent()
        repo.add(cart)

        logger.info(
            "Preorder follow-up sent",
            cart_id=str(cart.id),
            message_id=result.get("message_id"),
        )
