"""
Sharing an event link: native share first, then the clipboard, then a
manual copy prompt.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from app.explorer.catalog import text_value

logger = logging.getLogger(__name__)

DEFAULT_SHARE_TITLE = "Vietnamese History Event"


class ShareOutcome(str, Enum):
    SHARED = "shared"
    COPIED = "copied"
    PROMPT = "prompt"


def share_payload(event: dict, url: str) -> dict:
    return {
        "title": text_value(event.get("title")) or DEFAULT_SHARE_TITLE,
        "text": text_value(event.get("shortDescription")) or text_value(event.get("description")) or "",
        "url": url,
    }


def share_event(
    event: dict,
    url: str,
    share: Optional[Callable[[dict], None]] = None,
    copy: Optional[Callable[[str], None]] = None,
) -> ShareOutcome:
    """
    Try each available mechanism in turn. `share` and `copy` raise when the
    platform refuses; PROMPT means the caller shows the URL for manual copy.
    """
    if share is not None:
        try:
            share(share_payload(event, url))
            return ShareOutcome.SHARED
        except Exception as e:
            logger.info("Share failed, falling back to clipboard: %s", e)

    if copy is not None:
        try:
            copy(url)
            return ShareOutcome.COPIED
        except Exception as e:
            logger.info("Clipboard unavailable, prompting for manual copy: %s", e)

    return ShareOutcome.PROMPT
