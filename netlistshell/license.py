"""Expiry check for a plain-text licence file."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from os import PathLike
from typing import Optional, Union

logger = logging.getLogger(__name__)

_EXPIRY_KEY = "LICENSE_EXPIRES="


def _parse_iso(text: str) -> Optional[datetime]:
    """Parse an ISO 8601 date or date-time; naive values are local time."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment


def is_license_valid(
    path: Union[str, "PathLike[str]"], now: Optional[datetime] = None
) -> bool:
    """Return True if the file's LICENSE_EXPIRES date is not yet past."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            expires = ""
            for raw in handle:
                line = raw.strip()
                if line.startswith(_EXPIRY_KEY):
                    expires = line.split("=")[1]
                    break
    except OSError:
        logger.warning("Could not open license file.")
        return False

    if not expires:
        logger.warning("Expiry not found.")
        return False

    expiry = _parse_iso(expires)
    if expiry is None:
        logger.warning("Invalid date format.")
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.astimezone()

    if now > expiry:
        logger.warning("License expired at: %s", expiry.isoformat())
        return False

    logger.debug("Valid until: %s", expiry.isoformat())
    return True