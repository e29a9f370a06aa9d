# rateorant/services/notifications.py
import logging
from typing import Any, Dict, List, Optional

from ..session import decode_token
from ..utils.http_client import APIError, HTTPClient, normalize_list

logger = logging.getLogger(__name__)


async def get_notifications(
    client: HTTPClient,
    token: Optional[str],
    strict: bool = False
) -> List[Dict[str, Any]]:
    """Notifications for the signed-in restaurant owner.

    An empty list on any failure; with ``strict`` a failed request is
    logged the same way and the APIError re-raised, so pollers can tell
    an outage from an empty inbox.
    """
    if not token:
        logger.warning("No token provided to get_notifications")
        return []

    if decode_token(token) is None:
        logger.error("Token appears to be malformed, skipping notifications fetch")
        return []

    try:
        data = await client.get("/notifications", token=token)
    except APIError as e:
        if e.status_code == 401:
            logger.warning(
                f"401 Unauthorized fetching notifications ({e.detail or e.body}); "
                f"make sure the account has the restaurant_owner role"
            )
        elif e.status_code is None:
            logger.error(f"No response from server at {client.base_url}: {e.body}")
        else:
            logger.error(f"Error fetching notifications: {e}")
        if strict:
            raise
        return []

    notifications = normalize_list(data, "notifications") or []
    logger.debug(f"Fetched {len(notifications)} notifications")
    return notifications


def get_unread_count(notifications: List[Any]) -> int:
    count = 0
    for n in notifications:
        read = n.get("read") if isinstance(n, dict) else getattr(n, "read", False)
        if not read:
            count += 1
    return count
