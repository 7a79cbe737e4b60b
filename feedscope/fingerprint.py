"""
Feed fingerprint.

Stable digest over the parts of a feed that change when it is updated,
for change detection and conditional caching.
"""

import hashlib

from .models import Feed, Item


def _item_identity(item: Item) -> str:
    guid = item.guid.value if item.guid else None
    return guid or item.link or item.title or ""


def feed_hash(feed: Feed) -> str:
    """
    Hash a feed's build date and item identities.

    Items contribute guid, else link, else title, in order, so reordering
    items changes the hash.

    Returns:
        Lowercase hex SHA-256 digest.
    """
    payload = (feed.last_build_date or "") + "".join(_item_identity(item) for item in feed.items)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
