"""Low-stock alert email.

Email delivery is a non-critical side effect: failures are logged and
reported through the return value, never raised.
"""

from __future__ import annotations

from html import escape
from typing import List

import structlog
from django.conf import settings
from django.core.mail import send_mail

from modules.catalog.models import CatalogItem
from modules.catalog.services import group_by_category

logger = structlog.get_logger(__name__)


def render_low_stock_report(items: List[CatalogItem]) -> tuple[str, str]:
    """Return ``(plain_text, html)`` bodies grouped by category."""
    lines = ["The following items are running low on stock:", ""]
    html = [
        "<h2>Low Stock Alert</h2>",
        "<p>The following items are running low on stock:</p>",
    ]
    for category, bucket in group_by_category(items).items():
        lines.append(category.capitalize())
        html.append(f"<h3>{escape(category.capitalize())}</h3><ul>")
        for item in bucket:
            lines.append(
                f"- {item.name}: {item.stock} remaining "
                f"(threshold: {item.low_stock_threshold})"
            )
            html.append(
                f"<li><strong>{escape(item.name)}</strong>: {item.stock} remaining "
                f"(threshold: {item.low_stock_threshold})</li>"
            )
        html.append("</ul>")
    lines.append("")
    lines.append("Please restock these items as soon as possible.")
    html.append("<p><strong>Please restock these items as soon as possible.</strong></p>")
    return "\n".join(lines), "".join(html)


def send_low_stock_alert(items: List[CatalogItem]) -> bool:
    """Email the admin about ``items``; ``True`` when a message went out."""
    if not items:
        return False
    if not settings.ADMIN_EMAIL:
        logger.warning("low_stock.alert_skipped", reason="ADMIN_EMAIL not configured")
        return False

    text, html = render_low_stock_report(items)
    try:
        send_mail(
            subject=f"Low Stock Alert - {len(items)} items need restocking",
            message=text,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[settings.ADMIN_EMAIL],
            html_message=html,
        )
    except Exception as exc:
        logger.warning("low_stock.alert_failed", error=str(exc), item_count=len(items))
        return False

    logger.info("low_stock.alert_sent", item_count=len(items))
    return True
