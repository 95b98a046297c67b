# utils/notifier.py
import logging
from typing import Optional

import httpx

from models import ReviewContext

logger = logging.getLogger(__name__)


def build_teams_message(context: ReviewContext, comment_count: int) -> dict:
    return {
        "@type": "MessageCard",
        "@context": "http://schema.org/extensions",
        "themeColor": "0076D7",
        "summary": f"New code review comments on PR: {context.title}",
        "sections": [{
            "activityTitle": "Code Review Bot - New Comments",
            "activitySubtitle": context.title,
            "facts": [
                {"name": "Repository", "value": context.full_name},
                {"name": "Pull Request", "value": context.title},
                {"name": "Number of Comments", "value": str(comment_count)},
            ],
        }],
        "potentialAction": [{
            "@type": "OpenUri",
            "name": "View Pull Request",
            "targets": [{"os": "default", "uri": context.url}],
        }],
    }


async def send_teams_message(context: ReviewContext, comment_count: int,
                             webhook_url: Optional[str], *,
                             transport: Optional[httpx.AsyncBaseTransport] = None) -> bool:
    """
    Best effort: returns True when the webhook accepted the card. Failures are
    logged and never raised.
    """
    if not webhook_url:
        logger.info("Teams webhook URL not provided, skipping Teams notification")
        return False

    try:
        async with httpx.AsyncClient(timeout=15.0, transport=transport) as client:
            resp = await client.post(webhook_url, json=build_teams_message(context, comment_count))
    except Exception as e:
        logger.error("Error sending Teams message: %s", e)
        return False

    if not resp.is_success:
        logger.error("Failed to send Teams message: %s %s", resp.status_code, resp.reason_phrase)
        return False
    return True
